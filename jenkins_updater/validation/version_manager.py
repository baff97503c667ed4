"""
Version token validation and comparison.

Versions are opaque strings compared for equality only. Tokens coming
from the command line are checked against a strict character set before
they are used to build archive file names or URLs.
"""

import re
from typing import Optional

from loguru import logger

from ..core.constants import (
    ARCHIVE_ARCHITECTURE,
    ARCHIVE_EXTENSION,
    MAX_VERSION_LENGTH,
    VERSION_TOKEN_PATTERN,
)
from ..core.enums import VersionAction
from ..core.exceptions import InvalidVersionError

_VERSION_RE = re.compile(VERSION_TOKEN_PATTERN)


def validate_version_token(version: Optional[str]) -> str:
    """
    Check a version token is safe to embed in a file name or URL.

    Supports tokens like:
    - 1.652
    - 2.426.3
    - 2.60.3+deb1~bpo
    Epochs (1:2.0) and path separators are rejected.

    Raises:
        InvalidVersionError: When the token is empty, too long or contains
            characters outside [A-Za-z0-9.+~-]
    """
    if version is None or not version.strip():
        raise InvalidVersionError("A version is required for rollback")

    if len(version) > MAX_VERSION_LENGTH:
        raise InvalidVersionError(
            f"Version '{version[:20]}...' is longer than {MAX_VERSION_LENGTH} characters"
        )

    if not _VERSION_RE.fullmatch(version):
        raise InvalidVersionError(
            f"Version '{version}' contains characters that are not allowed",
            remediation="Use a plain Debian version such as 2.426.3",
        )
    return version


def compare_versions(running: Optional[str], candidate: Optional[str]) -> VersionAction:
    """
    Compare running and candidate versions.

    Returns:
        VersionAction.UNKNOWN when either side could not be determined,
        SAME_VERSION when they are equal, VERSION_CHANGE otherwise
    """
    if not running or not candidate:
        logger.debug(f"Version comparison undecidable: {running!r} vs {candidate!r}")
        return VersionAction.UNKNOWN
    if running == candidate:
        return VersionAction.SAME_VERSION
    return VersionAction.VERSION_CHANGE


def archive_filename(
    package_name: str, version: str, architecture: str = ARCHIVE_ARCHITECTURE
) -> str:
    """Name of the archive for one version, e.g. jenkins_1.652_all.deb."""
    validate_version_token(version)
    return f"{package_name}_{version}_{architecture}{ARCHIVE_EXTENSION}"
