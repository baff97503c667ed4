"""
Application enumerations for type safety and clear intent definitions.

Centralized enum definitions for run record severities, workflow states,
service states and version actions used throughout the updater.
"""

from enum import Enum


class Severity(Enum):
    """Severity of a run record line. Values double as loguru level names."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    INFO = "INFO"
    ACTION = "ACTION"


class OperationMode(Enum):
    """Top-level operations accepted on the command line."""

    UPDATE = "update"
    ROLLBACK = "rollback"


class WorkflowState(Enum):
    """States of the update and rollback workflows."""

    START = "start"
    BACKUP = "backup"
    REFRESH_INDEX = "refresh_index"
    UPGRADE = "upgrade"
    FETCH_OLD_PACKAGE = "fetch_old_package"
    INSTALL_OLD_PACKAGE = "install_old_package"
    VERIFY_VERSION = "verify_version"
    VERIFY_RUNNING = "verify_running"
    DONE = "done"
    ERROR = "error"


class ServiceState(Enum):
    """Normalized state of the managed service."""

    RUNNING = "running"
    STARTING = "starting"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class VersionAction(Enum):
    """Outcome of comparing the running and candidate versions."""

    SAME_VERSION = "same_version"
    VERSION_CHANGE = "version_change"
    UNKNOWN = "unknown"


class OperationStatus(Enum):
    """Status of a workflow step."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"
