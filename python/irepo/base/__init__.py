"""
Foundation classes shared by all of the irepo subsystems
"""

class IRepoException(Exception):
    """
    A general base class for exceptions raised by the irepo package
    """
    def __init__(self, message=None, cause=None):
        if not message:
            if cause:
                message = str(cause)
            else:
                message = "Unknown repository error"
        super(IRepoException, self).__init__(message)
        self.cause = cause

class StateException(IRepoException):
    """
    An exception indicating that the system (or an object within it) is in an unexpected
    state for the requested operation.
    """
    pass

class SystemInfoMixin(object):
    """
    provides information about the system or subsystem that a class is a part of
    """

    def __init__(self, sysname, sysabbrev, subsysname, subsysabbrev, version):
        self._sysname = sysname
        self._sysabbrev = sysabbrev
        self._subsysname = subsysname
        self._subsysabbrev = subsysabbrev
        self._version = version

    @property
    def system_name(self):
        return self._sysname

    @property
    def system_abbrev(self):
        return self._sysabbrev

    @property
    def subsystem_name(self):
        return self._subsysname

    @property
    def subsystem_abbrev(self):
        return self._subsysabbrev

    @property
    def system_version(self):
        return self._version
