"""
Post-operation validation.

Confirms the service is running and, after a rollback, that the
requested version is the one installed.
"""

from typing import Optional

from loguru import logger

from ..core.dataclasses import ServiceStatus
from ..core.exceptions import InstallVersionMismatch, ServiceNotRunning
from ..host.package_manager import AptPackageManager
from ..host.service_controller import SystemdServiceController


class PostUpgradeValidator:
    """Checks run after the package operation of a workflow."""

    def __init__(
        self,
        packages: AptPackageManager,
        service: SystemdServiceController,
        package_label: str,
    ):
        self.packages = packages
        self.service = service
        self.package_label = package_label

    def verify_running(self, status: Optional[ServiceStatus] = None) -> ServiceStatus:
        """
        Raises:
            ServiceNotRunning: Unless the service reports RUNNING
        """
        status = status or self.service.status()
        if not status.is_running:
            raise ServiceNotRunning(
                f"{self.package_label} server is NOT running! ({status.describe()})"
            )
        logger.info(f"Service healthy: {status.describe()}")
        return status

    def verify_installed_version(self, expected: str) -> str:
        """
        Raises:
            InstallVersionMismatch: When the installed version is not `expected`
        """
        installed = self.packages.policy_installed_version()
        if installed != expected:
            raise InstallVersionMismatch(
                f"Unable to roll back {self.package_label}: installed version is "
                f"{installed or 'unknown'}, expected {expected}"
            )
        return installed
