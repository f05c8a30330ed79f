"""
Support for accessing the repository's Solr search index.

The :py:class:`~irepo.index.solr.SolrClient` provides the connection to the index; the
:py:mod:`~irepo.index.facets` module interprets facet results, and the
:py:mod:`~irepo.index.indexer` module turns repository entities into index documents.
"""
from irepo.base import IRepoException

class IndexException(IRepoException):
    """
    A general base class for exceptions that occur while using the search index
    """
    pass

class IndexServiceException(IndexException):
    """
    an exception indicating a problem using the search index service.
    """

    def __init__(self, resource=None, http_code=None, http_reason=None, message=None, cause=None):
        if not message:
            if resource:
                message = f"Trouble accessing {resource} from the search index"
            else:
                message = f"Problem accessing the search index"
            if http_code or http_reason:
                message += ":"
                if http_code:
                    message += " "+str(http_code)
                if http_reason:
                    message += " "+str(http_reason)
            elif cause:
                message += ": "+str(cause)

        super(IndexServiceException, self).__init__(message, cause)
        self.resource = resource
        self.code = http_code
        self.status = http_reason


class IndexServerError(IndexServiceException):
    """
    an exception indicating that the search index is unavailable or failed on the server-side
    (including connection failures and timeouts).

    This exception includes three extra public properties, `code`, `status`,
    and `resource` which capture the HTTP response status code, the associated
    HTTP response message, and (optionally) a name for the index handler being
    accessed.
    """

    def __init__(self, resource=None, http_code=None, http_reason=None, message=None, cause=None):
        super(IndexServerError, self).__init__(resource, http_code, http_reason, message, cause)

class IndexClientError(IndexServiceException):
    """
    an exception indicating that the search index rejected a request as erroneous (e.g. a
    bad query syntax or an unknown field).
    """

    def __init__(self, resource, http_code, http_reason, message=None, cause=None):
        if not message:
            message = "client-side search index error occurred"
            if resource:
                message += " while processing " + resource
            message += ": {0} {1}".format(http_code, http_reason)

        super(IndexClientError, self).__init__(resource, http_code, http_reason, message, cause)

class MalformedResponse(IndexException):
    """
    an exception indicating that a response from the search index did not have the expected
    shape or content (e.g. an odd-length facet list or a non-numeric count).  Counts derived
    from such a response cannot be trusted.
    """
    def __init__(self, message, field=None, cause=None):
        super(MalformedResponse, self).__init__(message, cause)
        self.field = field
