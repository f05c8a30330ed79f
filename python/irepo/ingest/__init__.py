"""
Support for ingesting files into the repository
"""
from irepo.base import IRepoException

class IngestError(IRepoException):
    """
    an exception indicating that requested files could not be ingested
    """
    pass

class LocalIngestDisabled(IngestError):
    """
    an exception indicating that ingest from users' server-side directories is not enabled
    """
    def __init__(self, message=None):
        if not message:
            message = "Ingest of files from a user-directory on the server is not enabled."
        super(LocalIngestDisabled, self).__init__(message)

class NoUserDirectory(IngestError):
    """
    an exception indicating that the requesting user does not have a server-side directory
    """
    def __init__(self, message=None):
        if not message:
            message = "Your account is not configured for importing files from a user-directory " + \
                      "on the server."
        super(NoUserDirectory, self).__init__(message)

from .config import IngestConfig
from .local import LocalIngestService
