"""
Host adapters.

Wraps the package manager, the service supervisor, the upstream archive
repository and plain command execution.
"""

from .command_runner import CommandRunner
from .downloader import ArchiveDownloader
from .package_manager import AptPackageManager
from .service_controller import SystemdServiceController

__all__ = [
    "AptPackageManager",
    "ArchiveDownloader",
    "CommandRunner",
    "SystemdServiceController",
]
