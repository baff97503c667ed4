"""
Core package for the Jenkins update automation.

Contains fundamental data structures, constants, enumerations, and exceptions
used throughout the updater.
"""

from .dataclasses import (
    BackupReport,
    CommandResult,
    PackagePolicy,
    RunResult,
    ServiceStatus,
    WorkflowStep,
)
from .enums import (
    OperationMode,
    OperationStatus,
    ServiceState,
    Severity,
    VersionAction,
    WorkflowState,
)
from .exceptions import (
    BackupFailure,
    BadArguments,
    ConcurrentRunError,
    ConfigurationError,
    FetchFailure,
    InstallationFailure,
    InstallVersionMismatch,
    InvalidVersionError,
    LoggerMisuse,
    RefreshFailure,
    ServiceControlError,
    ServiceNotRunning,
    UpdaterError,
    UpgradeFailure,
)

__all__ = [
    # Data classes
    "BackupReport",
    "CommandResult",
    "PackagePolicy",
    "RunResult",
    "ServiceStatus",
    "WorkflowStep",
    # Enums
    "OperationMode",
    "OperationStatus",
    "ServiceState",
    "Severity",
    "VersionAction",
    "WorkflowState",
    # Exceptions
    "BackupFailure",
    "BadArguments",
    "ConcurrentRunError",
    "ConfigurationError",
    "FetchFailure",
    "InstallationFailure",
    "InstallVersionMismatch",
    "InvalidVersionError",
    "LoggerMisuse",
    "RefreshFailure",
    "ServiceControlError",
    "ServiceNotRunning",
    "UpdaterError",
    "UpgradeFailure",
]
