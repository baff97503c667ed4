"""
Custom exception classes for update and rollback operations.

Provides hierarchical exception handling so that every failure of a run
maps onto one category and one ERROR line in the run record.
"""


class UpdaterError(Exception):
    """Base exception for all updater errors"""

    def __init__(self, message: str, remediation: str = None):
        self.message = message
        self.remediation = remediation
        super().__init__(self.message)


class BadArguments(UpdaterError):
    """Raised when the command line does not match a supported form"""

    pass


class InvalidVersionError(BadArguments):
    """Raised when a version token contains characters unsafe for paths or URLs"""

    pass


class ConfigurationError(UpdaterError):
    """Raised when settings cannot be loaded or validated"""

    pass


class LoggerMisuse(UpdaterError):
    """Raised when the run log is called with an unknown severity"""

    pass


class BackupFailure(UpdaterError):
    """Raised when cached package archives cannot be copied to the backup directory"""

    pass


class RefreshFailure(UpdaterError):
    """Raised when the package index refresh fails"""

    pass


class UpgradeFailure(UpdaterError):
    """Raised when the package upgrade fails or cannot be decided"""

    pass


class FetchFailure(UpdaterError):
    """Raised when an archive cannot be downloaded"""

    pass


class InstallationFailure(UpdaterError):
    """Raised when a downloaded archive cannot be installed"""

    pass


class InstallVersionMismatch(InstallationFailure):
    """Raised when the installed version differs from the requested one"""

    pass


class ServiceControlError(UpdaterError):
    """Raised when the service cannot be started or stopped"""

    pass


class ServiceNotRunning(UpdaterError):
    """Raised when the service is not running after an operation"""

    pass


class ConcurrentRunError(UpdaterError):
    """Raised when another run already holds the run lock"""

    pass
