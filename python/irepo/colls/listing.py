"""
Listing of the collections that a user has permission to use.

Permissions are taken from the access-control fields stored with each collection's index
document.  Every user is implicitly a member of the ``public`` group; authenticated users are
also implicitly members of the ``registered`` group.
"""
import logging
from collections import namedtuple
from collections.abc import Mapping
from typing import List, Sequence

from irepo.index.solr import SolrClient, terms_filter
from irepo.index import MalformedResponse

READ = 'read'
EDIT = 'edit'
ACCESS_LEVELS = (READ, EDIT)

PUBLIC_GROUP = "public"
REGISTERED_GROUP = "registered"
ANONYMOUS = "anonymous"

DEF_MAX_COLLECTIONS = 1000
COLLECTION_MODEL = "Collection"

CollectionRecord = namedtuple("CollectionRecord", "id title modified doc")
CollectionRecord.__doc__ = "a collection as described by the search index"

def record_from_doc(doc: Mapping) -> CollectionRecord:
    """
    create a :py:class:`CollectionRecord` from a collection's index document
    """
    title = doc.get('title_tesim', '')
    if isinstance(title, list):
        title = title[0] if title else ''
    return CollectionRecord(doc['id'], title, doc.get('system_modified_dtsi'), doc)

class CountService(object):
    """
    a service for finding the collections that a user is allowed to see (or edit).  Subclasses
    add counting of the collections' contents.
    """

    def __init__(self, solr: SolrClient, user: str=None, groups: Sequence[str]=None,
                 config: Mapping=None, log: logging.Logger=None):
        """
        :param SolrClient solr:  the client for the search index
        :param str        user:  the identifier of the user the results are for; if not provided,
                                 an anonymous user is assumed
        :param list     groups:  the groups the user is a member of (apart from the implicit groups)
        :param dict     config:  the service configuration; supported parameters include
                                 ``max_collections`` and ``superusers``.
        """
        self.solr = solr
        self.user = user or ANONYMOUS
        if config is None:
            config = {}
        self.cfg = config
        if not log:
            log = logging.getLogger("irepo.colls")
        self.log = log

        self.groups = [PUBLIC_GROUP]
        if self.user != ANONYMOUS:
            self.groups.append(REGISTERED_GROUP)
        for g in (groups or []):
            if g not in self.groups:
                self.groups.append(g)

    def is_superuser(self) -> bool:
        return self.user != ANONYMOUS and self.user in self.cfg.get("superusers", [])

    def access_filters(self, access: str) -> List[str]:
        """
        return the filter queries that restrict results to those the user has the given
        access to.
        :param str access:  either "read" or "edit"
        :raises ValueError:  if ``access`` is not a recognized access level
        """
        if access not in ACCESS_LEVELS:
            raise ValueError("Unrecognized access level (should be 'read' or 'edit'): "+str(access))
        if self.is_superuser():
            return []

        levels = [EDIT] if access == EDIT else [READ, EDIT]
        clauses = []
        for level in levels:
            clauses.append("_query_:\"%s\"" % terms_filter("%s_access_group_ssim" % level, self.groups))
            if self.user != ANONYMOUS:
                clauses.append("_query_:\"%s\"" % terms_filter("%s_access_person_ssim" % level,
                                                             [self.user]))
        return [" OR ".join(clauses)]

    def search_results(self, access: str) -> List[CollectionRecord]:
        """
        return the collections that the user has the given access to, most recently modified first
        :param str access:  either "read" or "edit"
        :raises IndexServerError:  if the search index is unavailable
        :raises MalformedResponse:  if the response has no document list
        """
        fq = ["has_model_ssim:" + COLLECTION_MODEL] + self.access_filters(access)
        params = {
            "q": "*:*",
            "fq": fq,
            "fl": "id,title_tesim,system_modified_dtsi",
            "sort": "system_modified_dtsi desc",
            "rows": self.cfg.get("max_collections", DEF_MAX_COLLECTIONS)
        }
        results = self.solr.select(params)
        try:
            docs = results['response']['docs']
        except (KeyError, TypeError) as ex:
            raise MalformedResponse("collection listing is missing its document list", cause=ex)
        self.log.debug("%s has %s access to %d collection(s)", self.user, access, len(docs))
        return [record_from_doc(d) for d in docs]
