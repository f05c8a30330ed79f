"""
Reporting of the number of works and files within each of the collections a user may use.
"""
from collections import namedtuple
from collections.abc import Mapping
from typing import Dict, List

from .listing import CountService
from irepo.index.solr import terms_filter
from irepo.index.facets import facet_field_counts
from irepo.index import MalformedResponse

DEF_JOIN_FIELD = "member_of_collection_ids_ssim"
MEMBERSHIP_FIELD = "member_of_collection_ids_ssim"
FILE_SETS_FIELD = "file_set_ids_ssim"

SearchResultForWorkCount = namedtuple("SearchResultForWorkCount",
                                      "collection_name updated work_count file_count")

class CollectionsCountService(CountService):
    """
    a service that returns the collections that a user has permission to use along with the
    number of works in each and the number of files attached to those works.
    """

    def search_results_with_work_count(self, access: str, join_field: str=DEF_JOIN_FIELD) \
            -> List[SearchResultForWorkCount]:
        """
        return the collections the user has the given access to, each paired with its work and
        file counts.  This is a two pass query:  first the collections are found, and then their
        works are retrieved and counted in a single query.

        :param str access:      either "read" or "edit"
        :param str join_field:  the index field that links a work to the collections it belongs to
        :return:  a list with one entry per collection, in the order returned by
                  :py:meth:`search_results`
                  :rtype: [SearchResultForWorkCount]
        :raises IndexServerError:   if the search index is unavailable
        :raises MalformedResponse:  if the index's counts are not properly formed or if more
                                    than ``max_works`` works match
        """
        collections = self.search_results(access)
        if not collections:
            return []

        ids = [c.id for c in collections]
        params = {
            "q": "*:*",
            "fq": terms_filter(join_field, ids),
            "fl": ",".join(dict.fromkeys(["id", join_field, MEMBERSHIP_FIELD, FILE_SETS_FIELD])),
            "rows": self.cfg.get("max_works", 100000),
            "facet": "true",
            "facet.field": join_field,
            "facet.limit": -1,
            "facet.mincount": 1
        }
        results = self.solr.select(params)

        counts = facet_field_counts(results, join_field)
        file_counts = self._count_files(results)
        self.log.debug("counted works in %d of %d collection(s)", len(counts), len(ids))

        return [SearchResultForWorkCount(c, '', counts.get(c.id, 0), file_counts.get(c.id, 0))
                for c in collections]

    def _count_files(self, results: Mapping) -> Dict[str, int]:
        # each work's files count toward every collection the work is filed in
        try:
            docs = results['response']['docs']
        except (KeyError, TypeError) as ex:
            raise MalformedResponse("response is missing its document list", cause=ex)

        # a truncated page of works would silently undercount the files
        found = results['response'].get('numFound')
        if found is not None and found != len(docs):
            raise MalformedResponse("counting query matched %s works but returned %d; "
                                    "increase max_works" % (found, len(docs)), field="numFound")

        file_counts = {}
        for doc in docs:
            colls = _as_list(doc.get(MEMBERSHIP_FIELD))
            nfiles = len(_as_list(doc.get(FILE_SETS_FIELD)))
            for id in colls:
                file_counts[id] = file_counts.get(id, 0) + nfiles
        return file_counts

def _as_list(val):
    if val is None:
        return []
    if isinstance(val, list):
        return val
    return [val]
