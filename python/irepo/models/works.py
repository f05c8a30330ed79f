"""
The repository entities that get indexed:  collections, works, and the file sets attached to works.
"""
import uuid
from datetime import datetime, timezone
from typing import List

from .typed import DescribesOwnType

def mint_id() -> str:
    """
    return a new, unique entity identifier
    """
    return uuid.uuid4().hex[:9]

def _now():
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

def _as_list(val):
    if val is None:
        return []
    if isinstance(val, list):
        return list(val)
    return [val]

def _first(val):
    val = _as_list(val)
    return val[0] if val else None

class RepoEntity(object):
    """
    a base class for repository entities that carry access control lists
    """

    def __init__(self, id: str=None, depositor: str=None, modified: str=None):
        self.id = id or mint_id()
        self.depositor = depositor
        self.modified = modified or _now()
        self.read_users = []
        self.read_groups = []
        self.edit_users = []
        self.edit_groups = []
        if depositor:
            self.edit_users.append(depositor)

        # the document this entity was loaded from, if it was loaded from the index
        self.indexed = None

    def _load_acls(self, doc):
        self.read_users = _as_list(doc.get('read_access_person_ssim'))
        self.read_groups = _as_list(doc.get('read_access_group_ssim'))
        self.edit_users = _as_list(doc.get('edit_access_person_ssim'))
        self.edit_groups = _as_list(doc.get('edit_access_group_ssim'))

    def to_index_fields(self) -> dict:
        """
        return the index fields specific to this entity (apart from its ID and access controls)
        """
        out = { "system_modified_dtsi": self.modified }
        if self.depositor:
            out['depositor_ssim'] = [self.depositor]
            out['depositor_tesim'] = [self.depositor]
        return out

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, self.id)

class Collection(RepoEntity, DescribesOwnType):
    """
    a curated grouping of works
    """

    def __init__(self, id: str=None, title: str=None, depositor: str=None, modified: str=None):
        super(Collection, self).__init__(id, depositor, modified)
        self.title = title or ""

    def to_index_fields(self):
        out = super(Collection, self).to_index_fields()
        out['title_tesim'] = [self.title]
        return out

class GenericWork(RepoEntity, DescribesOwnType):
    """
    a deposited work which may belong to one or more collections and aggregates file sets
    """
    human_readable_short_description = "Deposit any kind of work"

    def __init__(self, id: str=None, title: str=None, depositor: str=None, modified: str=None,
                 member_of_collection_ids: List[str]=None, file_set_ids: List[str]=None):
        super(GenericWork, self).__init__(id, depositor, modified)
        self.title = title or ""
        self.member_of_collection_ids = list(member_of_collection_ids or [])
        self.file_set_ids = list(file_set_ids or [])

    @classmethod
    def from_index_doc(cls, doc):
        """
        recreate a work from its index document.  The document is retained so that re-indexing
        the work preserves the fields that this class does not model.
        """
        work = cls(doc['id'], _first(doc.get('title_tesim')), _first(doc.get('depositor_ssim')),
                   doc.get('system_modified_dtsi'),
                   _as_list(doc.get('member_of_collection_ids_ssim')),
                   _as_list(doc.get('file_set_ids_ssim')))
        work._load_acls(doc)
        work.indexed = dict(doc)
        return work

    def add_file_set(self, fileset):
        if fileset.id not in self.file_set_ids:
            self.file_set_ids.append(fileset.id)
        if self.id not in fileset.work_ids:
            fileset.work_ids.append(self.id)

    def to_index_fields(self):
        out = super(GenericWork, self).to_index_fields()
        out['title_tesim'] = [self.title]
        out['member_of_collection_ids_ssim'] = list(self.member_of_collection_ids)
        out['file_set_ids_ssim'] = list(self.file_set_ids)
        return out

class FileSet(RepoEntity):
    """
    a file deposited into the repository
    """

    def __init__(self, id: str=None, label: str=None, depositor: str=None, modified: str=None,
                 relative_path: str=None, stored_path: str=None):
        super(FileSet, self).__init__(id, depositor, modified)
        self.label = label
        self.relative_path = relative_path or label
        self.stored_path = stored_path
        self.work_ids = []

    def to_index_fields(self):
        out = super(FileSet, self).to_index_fields()
        out['label_tesim'] = [self.label]
        out['relative_path_ssi'] = self.relative_path
        if self.work_ids:
            out['generic_work_ids_ssim'] = list(self.work_ids)
        return out
