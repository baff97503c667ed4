"""
Application-wide constants and default configuration values.

Centralized defaults for package names, host paths, timeouts and log
formatting so that every layer of the updater agrees on them.
"""

from typing import Final

# ==============================================================================
# PACKAGE AND SERVICE CONSTANTS
# ==============================================================================

DEFAULT_PACKAGE_NAME: Final[str] = "jenkins"
DEFAULT_PACKAGE_LABEL: Final[str] = "Jenkins"
DEFAULT_SERVICE_NAME: Final[str] = "jenkins"

# Architecture suffix of the upstream Jenkins archives
ARCHIVE_ARCHITECTURE: Final[str] = "all"
ARCHIVE_EXTENSION: Final[str] = ".deb"

# ==============================================================================
# HOST PATHS AND URLS
# ==============================================================================

APT_ARCHIVE_CACHE_DIR: Final[str] = "/var/cache/apt/archives"
DEFAULT_BINARY_BASE_URL: Final[str] = "http://pkg.jenkins-ci.org/debian/binary/"

BACKUP_DIR_NAME: Final[str] = "backups"
LOG_FILE_SUFFIX: Final[str] = ".log"
LOCK_FILE_SUFFIX: Final[str] = ".lock"
PARTIAL_DOWNLOAD_SUFFIX: Final[str] = ".part"

DEFAULT_PROGRAM_NAME: Final[str] = "jenkins-updater"
ENV_PREFIX: Final[str] = "JENKINS_UPDATER_"
CONFIG_ENV_VAR: Final[str] = "JENKINS_UPDATER_CONFIG"

# ==============================================================================
# TIMING CONSTANTS
# ==============================================================================

SERVICE_SETTLE_DELAY: Final[float] = 3.0  # seconds after start/stop
DEFAULT_DOWNLOAD_TIMEOUT: Final[float] = 300.0  # seconds
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024  # bytes

# ==============================================================================
# RUN RECORD FORMAT
# ==============================================================================

RUN_RECORD_FORMAT: Final[str] = "{time:YYYYMMDD HHmmss} {level} {message}"
DIAGNOSTIC_FORMAT: Final[str] = (
    "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level: <8} - [{file}:{line}] - {message}"
)
DEFAULT_DIAGNOSTIC_LEVEL: Final[str] = "WARNING"

# Custom loguru level used for "ACTION" run record lines
ACTION_LEVEL_NO: Final[int] = 22

RUN_SEPARATOR: Final[str] = "================================"

# ==============================================================================
# VERSION VALIDATION
# ==============================================================================

# Debian version characters without epoch, so tokens are safe in paths and URLs
VERSION_TOKEN_PATTERN: Final[str] = r"[0-9][A-Za-z0-9.+~-]*"
MAX_VERSION_LENGTH: Final[int] = 128
