"""
Rollback workflow.

START -> FETCH_OLD_PACKAGE -> INSTALL_OLD_PACKAGE -> VERIFY_VERSION ->
VERIFY_RUNNING -> DONE, with ERROR reachable from every state.

A failed rollback leaves the host as it is; no attempt is made to
restore the version that was installed before.
"""

from pathlib import Path

from ..config import UpdaterSettings
from ..core.dataclasses import RunResult
from ..core.enums import OperationMode, OperationStatus, WorkflowState
from ..host.downloader import ArchiveDownloader
from ..host.package_manager import AptPackageManager
from ..host.service_controller import SystemdServiceController
from ..progress.run_log import RunLog
from ..validation.version_manager import archive_filename, validate_version_token
from .workflow import Workflow


class RollbackManager(Workflow):
    """Installs a specific older archive fetched from upstream."""

    mode = OperationMode.ROLLBACK

    def __init__(
        self,
        settings: UpdaterSettings,
        run_log: RunLog,
        packages: AptPackageManager,
        service: SystemdServiceController,
        downloader: ArchiveDownloader,
        version: str,
    ):
        super().__init__(settings, run_log, packages, service)
        self.downloader = downloader
        self.version = version

    def _run(self, result: RunResult) -> None:
        self._enter(WorkflowState.FETCH_OLD_PACKAGE)
        version = validate_version_token(self.version)
        result.target_version = version
        result.initial_version = self.packages.installed_version()
        self.run_log.action(f"  Performing roll back to {version}:")

        archive = self._fetch(result, version)
        self._install(result, archive)
        self._verify_version(result, version)
        self._verify_running(result)

    def _fetch(self, result: RunResult, version: str) -> Path:
        filename = archive_filename(self.settings.package_name, version)
        archive = self.downloader.fetch(filename, self.settings.download_dir)
        self.run_log.success(f"  - {self.label} package for roll back retrieved.")
        result.add_step(WorkflowState.FETCH_OLD_PACKAGE, OperationStatus.COMPLETED, filename)
        return archive

    def _install(self, result: RunResult, archive: Path) -> None:
        self._enter(WorkflowState.INSTALL_OLD_PACKAGE)
        self.run_log.info(f" - installing {archive.name}:")
        self.packages.install_archive(archive)
        result.add_step(WorkflowState.INSTALL_OLD_PACKAGE, OperationStatus.COMPLETED)

    def _verify_version(self, result: RunResult, version: str) -> None:
        self._enter(WorkflowState.VERIFY_VERSION)
        result.final_version = self.validator.verify_installed_version(version)
        self.run_log.success(f"  - {self.label} has been rolled back to {version}")
        result.add_step(WorkflowState.VERIFY_VERSION, OperationStatus.COMPLETED)
