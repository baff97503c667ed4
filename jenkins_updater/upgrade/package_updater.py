"""
Update workflow.

START -> BACKUP -> REFRESH_INDEX -> UPGRADE -> VERIFY_RUNNING -> DONE,
with ERROR reachable from every state. The service is stopped, and
confirmed stopped, before the package is upgraded; nothing is stopped
when the candidate version is already installed.
"""

from ..core.dataclasses import RunResult
from ..core.enums import OperationMode, OperationStatus, ServiceState, VersionAction, WorkflowState
from ..core.exceptions import ServiceControlError, UpgradeFailure
from ..validation.version_manager import compare_versions
from .backup import ArchiveBackup
from .workflow import Workflow

STOPPED_STATES = (ServiceState.STOPPED, ServiceState.FAILED)


class PackageUpdater(Workflow):
    """Upgrades the package to the candidate version of the package index."""

    mode = OperationMode.UPDATE

    def _run(self, result: RunResult) -> None:
        self._backup(result)
        self._refresh_index(result)
        self._upgrade(result)
        self._verify_running(result)

    def _backup(self, result: RunResult) -> None:
        self._enter(WorkflowState.BACKUP)
        self.run_log.action(f"  Backing up current {self.label} package:")

        report = ArchiveBackup(
            self.settings.archive_cache_dir,
            self.settings.archive_glob,
            self.settings.backup_dir,
        ).run()

        self.run_log.success(f"  - Current {self.label} deb package was copied to backup.")
        self.run_log.info(
            f"    {len(report.copied)} copied, {len(report.up_to_date)} already up to date"
        )
        result.add_step(WorkflowState.BACKUP, OperationStatus.COMPLETED)

    def _refresh_index(self, result: RunResult) -> None:
        self._enter(WorkflowState.REFRESH_INDEX)
        self.run_log.action("  Performing update:")
        self.run_log.info(" - refreshing the package index:")
        self.packages.refresh_index()
        result.add_step(WorkflowState.REFRESH_INDEX, OperationStatus.COMPLETED)

    def _upgrade(self, result: RunResult) -> None:
        self._enter(WorkflowState.UPGRADE)

        running = self.packages.installed_version()
        self.run_log.info(f"Running version is: {running or 'unknown'}")
        candidate = self.packages.candidate_version()
        self.run_log.info(f"Available version is: {candidate or 'unknown'}")

        result.initial_version = running
        result.target_version = candidate
        result.version_action = compare_versions(running, candidate)

        if result.version_action is VersionAction.UNKNOWN:
            which = "running" if not running else "available"
            raise UpgradeFailure(f"Unable to determine the {which} {self.label} version")

        if result.version_action is VersionAction.SAME_VERSION:
            self.run_log.info("Nothing to do.")
            self.run_log.info("The current running version is the latest available.")
            result.final_version = running
            result.add_step(WorkflowState.UPGRADE, OperationStatus.SKIPPED, "Nothing to do.")
            return

        self.run_log.action(f"Upgrading {self.label}:")
        self._stop_service()

        self.run_log.info(" - running apt-get:")
        self.packages.upgrade()

        installed = self.packages.installed_version()
        if installed != candidate:
            raise UpgradeFailure(
                f"Unable to update {self.label}: installed version is "
                f"{installed or 'unknown'}, expected {candidate}"
            )
        result.final_version = installed
        self.run_log.success(f"  - {self.label} has been updated to {installed}")

        if self.settings.start_stopped_service and not self.service.status().is_running:
            self.run_log.info(f" - starting {self.label} service:")
            self.service.start()

        result.add_step(WorkflowState.UPGRADE, OperationStatus.COMPLETED)

    def _stop_service(self) -> None:
        self.run_log.info(f" - stopping {self.label} service:")
        self.service.stop()

        status = self.service.status()
        if status.state not in STOPPED_STATES:
            raise ServiceControlError(
                f"Unable to stop the {self.label} service before upgrading "
                f"({status.describe()})"
            )
        self.run_log.info(f"   service is {status.state.value}")
