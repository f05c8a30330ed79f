"""
The configuration options that govern ingest
"""
from collections import namedtuple
from collections.abc import Mapping

from irepo.base.config import ConfigurationException

_options = ("enable_local_ingest", "storage_dir", "move_files", "index_on_ingest")
_defaults = (False, None, True, True)

class IngestConfig(namedtuple("IngestConfig", _options, defaults=_defaults)):
    """
    the options controlling ingest.  These are:

    ``enable_local_ingest``
         if True, files may be ingested from users' server-side directories (default: False)
    ``storage_dir``
         the directory where ingested files are stored
    ``move_files``
         if True (default), ingested files are moved out of the user's directory; otherwise,
         they are copied.
    ``index_on_ingest``
         if True (default), new entities are sent to the search index as they are created
    """
    __slots__ = ()

    @classmethod
    def from_config(cls, config: Mapping):
        """
        create an instance from a configuration dictionary (e.g. the ``ingest`` section of the
        overall configuration)
        :raises ConfigurationException:  if the dictionary contains unrecognized options
        """
        if not config:
            return cls()
        unknown = [k for k in config if k not in cls._fields]
        if unknown:
            raise ConfigurationException("Unrecognized ingest config option%s: %s" %
                                         ("s" if len(unknown) > 1 else "", ", ".join(unknown)))
        return cls(**config)
