"""
Serialization of repository entities into Solr index documents.
"""
import logging
from typing import Iterable, List, Optional

from . import MalformedResponse
from .solr import SolrClient, terms_filter
from irepo.base import StateException
from irepo.models import RepoEntity, DescribesOwnType
from irepo.utils.logging import blab

_suffixes = {
    "stored_searchable": "_tesim",
    "facetable":         "_sim",
    "symbol":            "_ssim",
    "stored_sortable":   "_ssi",
    "dateable":          "_dtsi",
    "sortable date":     "_dtsi"
}

# fields that Solr computes itself and that must not be sent back with an update
_internal_fields = ("_version_", "score")

def solr_name(field: str, kind: str="stored_searchable") -> str:
    """
    return the name of the index field for storing a property in the given manner,
    following the dynamic-field naming conventions of the repository's Solr schema.
    :param str field:  the base name of the property
    :param str  kind:  the indexing descriptor; one of "stored_searchable", "facetable",
                       "symbol", "stored_sortable", "dateable"
    :raises ValueError:  if ``kind`` is not recognized
    """
    try:
        return field + _suffixes[kind]
    except KeyError:
        raise ValueError("solr_name(): unrecognized field kind: "+str(kind))

class IndexingService(object):
    """
    a service for converting entities into index documents and sending them to the index
    """

    def __init__(self, solr: SolrClient=None, log: logging.Logger=None):
        self.solr = solr
        if not log:
            log = logging.getLogger("irepo.index.indexer")
        self.log = log

    def to_solr(self, entity: RepoEntity) -> dict:
        """
        return the index document for the given entity.  If the entity was loaded from the
        index, the fields of its original document are carried over unless the entity replaces them.
        """
        doc = {}
        if entity.indexed:
            doc.update((k, v) for k, v in entity.indexed.items() if k not in _internal_fields)

        doc.update({ "id": entity.id, "has_model_ssim": [type(entity).__name__] })
        doc.update(entity.to_index_fields())

        doc['read_access_person_ssim'] = list(entity.read_users)
        doc['read_access_group_ssim'] = list(entity.read_groups)
        doc['edit_access_person_ssim'] = list(entity.edit_users)
        doc['edit_access_group_ssim'] = list(entity.edit_groups)

        if isinstance(entity, DescribesOwnType):
            label = entity.human_readable_type
            doc[solr_name('human_readable_type', 'facetable')] = label
            doc[solr_name('human_readable_type', 'stored_searchable')] = label
            if entity.human_readable_short_description:
                doc[solr_name('human_readable_short_description')] = \
                    entity.human_readable_short_description

        return doc

    def fetch(self, id: str) -> Optional[dict]:
        """
        return the index document for the entity with the given identifier or None if it is
        not in the index
        :raises IndexServerError:   if the search index is unavailable
        :raises MalformedResponse:  if the response has no document list
        """
        if not self.solr:
            raise StateException("IndexingService: no search index client configured")

        results = self.solr.select({ "q": "*:*", "fq": terms_filter("id", [id]), "rows": 1 })
        try:
            docs = results['response']['docs']
        except (KeyError, TypeError) as ex:
            raise MalformedResponse("lookup of %s is missing its document list" % id, cause=ex)
        return docs[0] if docs else None

    def index(self, entities: Iterable[RepoEntity], commit: bool=True) -> List[dict]:
        """
        send the given entities to the index
        :return:  the documents that were sent
        """
        if not self.solr:
            raise StateException("IndexingService: no search index client configured")

        docs = [self.to_solr(e) for e in entities]
        for doc in docs:
            blab(self.log, "indexing %s (%s)", doc['id'], doc['has_model_ssim'][0])
        if docs:
            self.solr.add(docs, commit)
            self.log.info("Indexed %d entit%s", len(docs), "y" if len(docs) == 1 else "ies")
        return docs
