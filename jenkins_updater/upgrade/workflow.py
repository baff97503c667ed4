"""
Shared workflow driver.

Runs the steps of a workflow in order, records each visited state, and
turns the first UpdaterError into one ERROR line and a failed RunResult.
"""

import time
from abc import ABC, abstractmethod

from ..config import UpdaterSettings
from ..core.dataclasses import RunResult
from ..core.enums import OperationMode, OperationStatus, WorkflowState
from ..core.exceptions import LoggerMisuse, UpdaterError
from ..host.package_manager import AptPackageManager
from ..host.service_controller import SystemdServiceController
from ..progress.run_log import RunLog
from ..validation.post_upgrade_validator import PostUpgradeValidator


def error_line(message: str) -> str:
    message = message.rstrip()
    if not message.endswith((".", "!")):
        message += "."
    return f"  - {message} Exiting..."


class Workflow(ABC):
    """Base class for the update and rollback workflows."""

    mode: OperationMode

    def __init__(
        self,
        settings: UpdaterSettings,
        run_log: RunLog,
        packages: AptPackageManager,
        service: SystemdServiceController,
    ):
        self.settings = settings
        self.run_log = run_log
        self.packages = packages
        self.service = service
        self.label = settings.package_label
        self.validator = PostUpgradeValidator(packages, service, self.label)
        self._current = WorkflowState.START

    def _enter(self, state: WorkflowState) -> None:
        self._current = state

    @abstractmethod
    def _run(self, result: RunResult) -> None:
        """Run the workflow steps, raising UpdaterError on the first failure."""

    def execute(self) -> RunResult:
        """Run every step; never raises UpdaterError except LoggerMisuse."""
        result = RunResult(mode=self.mode, start_time=time.time())
        result.add_step(WorkflowState.START, OperationStatus.COMPLETED)

        try:
            self._run(result)
        except LoggerMisuse:
            raise
        except UpdaterError as e:
            self._fail(result, e)
        else:
            result.success = True
            result.add_step(WorkflowState.DONE, OperationStatus.COMPLETED, "DONE!")
            self.run_log.info("DONE!")
        finally:
            result.end_time = time.time()
            result.calculate_duration()

        return result

    def _fail(self, result: RunResult, error: UpdaterError) -> None:
        result.error = error.message
        result.error_type = type(error).__name__
        result.add_step(self._current, OperationStatus.FAILED, error.message)
        result.add_step(WorkflowState.ERROR, OperationStatus.FAILED, error.message)

        self.run_log.error(error_line(error.message))
        if error.remediation:
            self.run_log.info(f"    Hint: {error.remediation}")

    def _verify_running(self, result: RunResult) -> None:
        self._enter(WorkflowState.VERIFY_RUNNING)
        self.run_log.action(f" Checking {self.label} service status:")

        status = self.service.status()
        result.service_status = status
        self.run_log.info(f"  {status.describe()}")

        self.validator.verify_running(status)
        self.run_log.success(f"  - {self.label} server is running!")
        result.add_step(WorkflowState.VERIFY_RUNNING, OperationStatus.COMPLETED)
