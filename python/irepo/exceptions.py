"""
Exceptions that can be raised throughout the irepo package
"""
from .base import IRepoException, StateException
from .base.config import ConfigurationException
from .index import (IndexException, IndexServiceException, IndexServerError, IndexClientError,
                    MalformedResponse)

__all__ = [ "IRepoException", "StateException", "ConfigurationException", "IndexException",
            "IndexServiceException", "IndexServerError", "IndexClientError", "MalformedResponse" ]
