"""
Update and rollback workflows.

Provides the update workflow, the rollback workflow and the archive
backup step they rely on.
"""

from .backup import ArchiveBackup
from .package_updater import PackageUpdater
from .rollback_manager import RollbackManager
from .workflow import Workflow

__all__ = ["ArchiveBackup", "PackageUpdater", "RollbackManager", "Workflow"]
