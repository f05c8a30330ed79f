"""
Services for reporting on the repository's collections
"""
from .listing import CountService, CollectionRecord, READ, EDIT
from .count import CollectionsCountService, SearchResultForWorkCount, DEF_JOIN_FIELD
