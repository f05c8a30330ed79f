"""
the repository entity model
"""
from .typed import DescribesOwnType
from .works import RepoEntity, Collection, GenericWork, FileSet, mint_id
