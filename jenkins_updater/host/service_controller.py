"""
Service control through systemd.

Start and stop block for a settle delay so systemd can converge before
the next check. Status comes from `systemctl show` properties rather
than from the free-text output of `service <name> status`.
"""

import os
import time
from typing import Callable, Dict, Optional

from loguru import logger

from ..core.constants import SERVICE_SETTLE_DELAY
from ..core.dataclasses import ServiceStatus
from ..core.enums import ServiceState
from ..core.exceptions import ServiceControlError
from .command_runner import CommandRunner

STATUS_PROPERTIES = ("LoadState", "ActiveState", "SubState", "MainPID")


def process_exists(pid: int) -> bool:
    """True if a process with this pid exists on the host."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by another user
        return True
    return True


def parse_properties(output: str) -> Dict[str, str]:
    properties = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            properties[key.strip()] = value.strip()
    return properties


def status_from_properties(
    properties: Dict[str, str], pid_alive: Callable[[int], bool] = process_exists
) -> ServiceStatus:
    """Map systemd unit properties onto a ServiceStatus."""
    load_state = properties.get("LoadState", "")
    active_state = properties.get("ActiveState", "")
    sub_state = properties.get("SubState", "")
    try:
        pid = int(properties.get("MainPID", "0")) or None
    except ValueError:
        pid = None

    if load_state == "not-found":
        state = ServiceState.NOT_FOUND
    elif active_state == "active":
        if sub_state == "running" and pid and pid_alive(pid):
            state = ServiceState.RUNNING
        else:
            state = ServiceState.UNKNOWN
    elif active_state in ("activating", "reloading"):
        state = ServiceState.STARTING
    elif active_state == "deactivating":
        state = ServiceState.STOPPING
    elif active_state == "inactive":
        state = ServiceState.STOPPED
    elif active_state == "failed":
        state = ServiceState.FAILED
    else:
        state = ServiceState.UNKNOWN

    return ServiceStatus(
        state=state,
        pid=pid,
        load_state=load_state,
        active_state=active_state,
        sub_state=sub_state,
    )


class SystemdServiceController:
    """Start, stop and status for one systemd unit."""

    def __init__(
        self,
        runner: CommandRunner,
        service_name: str,
        settle_delay: float = SERVICE_SETTLE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        pid_alive: Optional[Callable[[int], bool]] = None,
    ):
        self.runner = runner
        self.service_name = service_name
        self.settle_delay = settle_delay
        self.sleep = sleep
        self.pid_alive = pid_alive or process_exists

    def _control(self, verb: str) -> None:
        logger.info(f"[{self.service_name}] systemctl {verb}")
        result = self.runner.run(["systemctl", verb, self.service_name])
        if not result.ok:
            raise ServiceControlError(
                f"Unable to {verb} the {self.service_name} service: {result.describe()}"
            )
        if self.settle_delay:
            self.sleep(self.settle_delay)

    def start(self) -> None:
        self._control("start")

    def stop(self) -> None:
        self._control("stop")

    def status(self) -> ServiceStatus:
        args = ["systemctl", "show", self.service_name]
        args += [f"--property={name}" for name in STATUS_PROPERTIES]
        result = self.runner.run(args)
        if not result.ok:
            logger.warning(f"[{self.service_name}] status query failed: {result.describe()}")
            return ServiceStatus(state=ServiceState.UNKNOWN)

        status = status_from_properties(parse_properties(result.stdout), self.pid_alive)
        logger.debug(f"[{self.service_name}] status: {status.describe()}")
        return status
