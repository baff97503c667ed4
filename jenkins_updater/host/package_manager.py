"""
apt/dpkg adapter.

Queries installed and candidate versions of the managed package and
wraps the index refresh, only-upgrade and archive install calls. Every
call's return code is checked; queries that cannot determine a version
return None instead of raising.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from ..core.dataclasses import PackagePolicy
from ..core.exceptions import InstallationFailure, RefreshFailure, UpgradeFailure
from .command_runner import CommandRunner

NONINTERACTIVE_ENV = {"DEBIAN_FRONTEND": "noninteractive"}
NO_VERSION = "(none)"


def parse_policy(output: str) -> PackagePolicy:
    """
    Parse `apt-cache policy <pkg>` output.

    Only the first Installed:/Candidate: lines count; the version table
    below them is ignored.
    """
    policy = PackagePolicy()
    for line in output.splitlines():
        key, _, value = line.strip().partition(":")
        value = value.strip()
        if key == "Installed" and policy.installed is None:
            policy.installed = value if value and value != NO_VERSION else None
        elif key == "Candidate" and policy.candidate is None:
            policy.candidate = value if value and value != NO_VERSION else None
    return policy


class AptPackageManager:
    """Package manager operations for a single package."""

    def __init__(self, runner: CommandRunner, package_name: str):
        self.runner = runner
        self.package_name = package_name

    def installed_version(self) -> Optional[str]:
        """Version recorded by dpkg, or None when not installed."""
        result = self.runner.run(
            ["dpkg-query", "--show", "--showformat=${Version}", self.package_name]
        )
        if not result.ok:
            logger.debug(f"dpkg-query found no {self.package_name}: {result.describe()}")
            return None
        return result.stdout.strip() or None

    def policy(self) -> PackagePolicy:
        result = self.runner.run(["apt-cache", "policy", self.package_name])
        if not result.ok:
            logger.warning(f"apt-cache policy failed: {result.describe()}")
            return PackagePolicy()
        policy = parse_policy(result.stdout)
        logger.debug(
            f"Policy for {self.package_name}: installed={policy.installed} "
            f"candidate={policy.candidate}"
        )
        return policy

    def candidate_version(self) -> Optional[str]:
        return self.policy().candidate

    def policy_installed_version(self) -> Optional[str]:
        return self.policy().installed

    def refresh_index(self) -> None:
        result = self.runner.run(["apt-get", "-q", "update"], env=NONINTERACTIVE_ENV)
        if not result.ok:
            raise RefreshFailure(
                f"Unable to refresh the package index: {result.describe()}",
                remediation="Check the apt sources and network access of the host",
            )

    def upgrade(self) -> None:
        """Upgrade the package only if it is already installed."""
        result = self.runner.run(
            ["apt-get", "install", "-y", "-q", "--only-upgrade", self.package_name],
            env=NONINTERACTIVE_ENV,
        )
        if not result.ok:
            raise UpgradeFailure(f"Unable to upgrade {self.package_name}: {result.describe()}")

    def install_archive(self, archive: Path) -> None:
        """Install a local archive, allowing it to replace a newer version."""
        result = self.runner.run(
            ["dpkg", "--install", "--force-downgrade", str(archive)],
            env=NONINTERACTIVE_ENV,
        )
        if not result.ok:
            raise InstallationFailure(f"Unable to install {archive.name}: {result.describe()}")
