"""
Provide Python-side services for an institutional repository built over a Solr search index:
collection count reporting, entity indexing, and ingest of files from users' server-side
directories.
"""
import os
from pathlib import Path

from .base import IRepoException, SystemInfoMixin

try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

_IREPOSYSNAME = "Institutional Repository"
_IREPOSYSABBREV = "IR"

class IRepoSystem(SystemInfoMixin):
    """
    A SystemInfoMixin representing the overall repository system.
    """
    def __init__(self, subsysname="", subsysabbrev=""):
        super(IRepoSystem, self).__init__(_IREPOSYSNAME, _IREPOSYSABBREV, subsysname, subsysabbrev,
                                          __version__)

system = IRepoSystem()

def find_etc_dir(config=None):
    """
    return the path to the etc directory containing default configuration files
    """
    from .base.config import ConfigurationException

    def assert_exists(dir, ctxt=""):
        if not os.path.exists(dir):
            msg = "{0}directory does not exist: {1}".format(ctxt, dir)
            raise ConfigurationException(msg)

    # check local configuration
    if config and 'etc_lib' in config:
        assert_exists(config['etc_lib'], "config param 'etc_lib' ")
        return config['etc_lib']

    if 'IREPO_HOME' in os.environ:
        # this is might be the install base or the source base directory;
        # either way, etc, is a subdirectory.
        assert_exists(os.environ['IREPO_HOME'], "env var IREPO_HOME ")
        candidates = [Path(os.environ['IREPO_HOME']) / 'etc']

    else:
        # library used from its source location: {root}/python/irepo
        candidates = [Path(__file__).parents[2] / 'etc']

        # library installed under {root}/lib/python
        candidates.append(Path(__file__).parents[3] / 'etc')

    for dir in candidates:
        if dir.exists():
            return str(dir)

    return None

def_etc_dir = find_etc_dir()
