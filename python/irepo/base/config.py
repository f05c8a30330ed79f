"""
Utilities for loading and applying configuration data.

Configuration in irepo is a plain (nested) dictionary, typically read from a YAML or JSON file.
This module also handles the set-up of the global log file.
"""
import os, json, logging
from collections.abc import Mapping
from copy import deepcopy

import yaml

from . import IRepoException

NORMAL = 15
logging.addLevelName(NORMAL, "NORMAL")

DEF_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

global_logdir = None
global_logfile = None
_log_handler = None

class ConfigurationException(IRepoException):
    """
    a class indicating an error in the configuration of a service or tool
    """
    def __init__(self, message=None, cause=None, sys=None):
        super(ConfigurationException, self).__init__(message, cause)
        self.sys = sys

def load_from_file(configfile: str) -> Mapping:
    """
    read the configuration from the given file and return it as a dictionary.  The file
    format is determined by its filename extension:  ".json" files are parsed as JSON; all
    others are parsed as YAML.
    :raises ConfigurationException:  if the file cannot be read or parsed
    """
    try:
        with open(configfile) as fd:
            if configfile.endswith('.json'):
                out = json.load(fd)
            else:
                out = yaml.safe_load(fd)
    except OSError as ex:
        raise ConfigurationException("Unable to read config file, %s: %s" % (configfile, str(ex)),
                                     cause=ex)
    except (ValueError, yaml.YAMLError) as ex:
        raise ConfigurationException("Config file syntax error: %s: %s" % (configfile, str(ex)),
                                     cause=ex)

    if out is None:
        out = {}
    if not isinstance(out, Mapping):
        raise ConfigurationException("Config file does not contain a dictionary: "+configfile)
    return out

def merge_config(primary: Mapping, defconf: Mapping) -> Mapping:
    """
    merge the data from a primary configuration over that of a default configuration.  Values
    in the primary take precedence; where both have a dictionary under the same key, the
    dictionaries are merged recursively.  Neither input is altered.
    :return:  the merged configuration
    """
    out = deepcopy(defconf)
    for key, val in primary.items():
        if isinstance(val, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_config(val, out[key])
        else:
            out[key] = deepcopy(val)
    return out

def configure_log(logfile: str=None, level: int=None, format: str=None, config: Mapping=None,
                  addstderr=False):
    """
    configure the root logger to write messages to a log file.  The values given as arguments
    override those found in the configuration.

    :param str logfile:  the path to the log file; if relative, it is taken to be relative to
                         the ``logdir`` config parameter (or the current directory).
    :param int level:    the minimum level of messages to record
    :param str format:   the format string for log records
    :param dict config:  configuration data, consulted for ``logfile``, ``logdir``, ``loglevel``,
                         and ``logformat``
    :param bool addstderr:  if True, also send messages to standard error
    """
    global global_logdir, global_logfile, _log_handler
    if config is None:
        config = {}

    if not logfile:
        logfile = config.get('logfile', 'irepo.log')
    if not os.path.isabs(logfile):
        global_logdir = config.get('logdir', os.getcwd())
        logfile = os.path.join(global_logdir, logfile)
    else:
        global_logdir = os.path.dirname(logfile)
    global_logfile = logfile

    if level is None:
        level = config.get('loglevel', NORMAL)
        if isinstance(level, str):
            lev = logging.getLevelName(level.upper())
            if not isinstance(lev, int):
                raise ConfigurationException("loglevel: unrecognized level name: "+level)
            level = lev
    if not format:
        format = config.get('logformat', DEF_LOG_FORMAT)

    rootlog = logging.getLogger()
    if _log_handler:
        rootlog.removeHandler(_log_handler)
        _log_handler.close()

    _log_handler = logging.FileHandler(logfile)
    _log_handler.setLevel(level)
    _log_handler.setFormatter(logging.Formatter(format))
    rootlog.addHandler(_log_handler)

    if addstderr:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format))
        rootlog.addHandler(handler)

    if rootlog.level == logging.NOTSET or rootlog.level > level:
        rootlog.setLevel(level)
