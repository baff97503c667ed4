"""
Data classes for the updater.

Defines structured data containers for command results, package and
service state, and the outcome of a workflow run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .enums import (
    OperationMode,
    OperationStatus,
    ServiceState,
    VersionAction,
    WorkflowState,
)


@dataclass
class CommandResult:
    """Outcome of a single external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """Short human-readable description used in error messages."""
        detail = (self.stderr or self.stdout).strip().splitlines()
        tail = f": {detail[-1]}" if detail else ""
        return f"'{' '.join(self.args)}' exited with {self.returncode}{tail}"


@dataclass
class PackagePolicy:
    """Installed and candidate versions as reported by the package index."""

    installed: Optional[str] = None
    candidate: Optional[str] = None


@dataclass
class ServiceStatus:
    """Structured status of the managed service."""

    state: ServiceState
    pid: Optional[int] = None
    load_state: str = ""
    active_state: str = ""
    sub_state: str = ""

    @property
    def is_running(self) -> bool:
        return self.state is ServiceState.RUNNING

    def describe(self) -> str:
        pid = f", pid {self.pid}" if self.pid else ""
        return (
            f"{self.state.value} (load={self.load_state or '?'}, "
            f"active={self.active_state or '?'}, sub={self.sub_state or '?'}{pid})"
        )


@dataclass
class BackupReport:
    """Files handled by the archive backup step."""

    copied: List[str] = field(default_factory=list)
    up_to_date: List[str] = field(default_factory=list)


@dataclass
class WorkflowStep:
    """Represents an individual step of a workflow run."""

    state: WorkflowState
    status: OperationStatus
    message: str = ""
    timestamp: float = 0.0


@dataclass
class RunResult:
    """Comprehensive results of an update or rollback run."""

    mode: OperationMode
    success: bool = False
    state: WorkflowState = WorkflowState.START
    start_time: float = 0.0
    end_time: float = 0.0
    duration: float = 0.0
    initial_version: Optional[str] = None
    target_version: Optional[str] = None
    final_version: Optional[str] = None
    version_action: Optional[VersionAction] = None
    service_status: Optional[ServiceStatus] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    steps: List[WorkflowStep] = field(default_factory=list)

    def calculate_duration(self) -> float:
        """Calculate total run duration."""
        if self.start_time and self.end_time:
            self.duration = self.end_time - self.start_time
        return self.duration

    def add_step(
        self, state: WorkflowState, status: OperationStatus, message: str = ""
    ):
        """Record a step and move the run to its state."""
        self.state = state
        self.steps.append(
            WorkflowStep(
                state=state,
                status=status,
                message=message,
                timestamp=datetime.now().timestamp(),
            )
        )

    @property
    def visited_states(self) -> List[WorkflowState]:
        return [step.state for step in self.steps]
