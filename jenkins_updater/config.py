"""
Configuration Module
Defines the updater settings and how they are loaded.

Settings are resolved from, lowest to highest priority:
field defaults, an optional YAML file, JENKINS_UPDATER_* environment
variables, and finally explicit overrides coming from the command line.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .core.constants import (
    APT_ARCHIVE_CACHE_DIR,
    BACKUP_DIR_NAME,
    CONFIG_ENV_VAR,
    DEFAULT_BINARY_BASE_URL,
    DEFAULT_DIAGNOSTIC_LEVEL,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_PACKAGE_LABEL,
    DEFAULT_PACKAGE_NAME,
    DEFAULT_PROGRAM_NAME,
    DEFAULT_SERVICE_NAME,
    ENV_PREFIX,
    LOCK_FILE_SUFFIX,
    LOG_FILE_SUFFIX,
    SERVICE_SETTLE_DELAY,
)
from .core.exceptions import ConfigurationError

DIAGNOSTIC_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class UpdaterSettings(BaseModel):
    """All tunables of an update or rollback run."""

    model_config = ConfigDict(extra="forbid")

    program_name: str = DEFAULT_PROGRAM_NAME
    package_name: str = DEFAULT_PACKAGE_NAME
    package_label: str = DEFAULT_PACKAGE_LABEL
    service_name: str = DEFAULT_SERVICE_NAME

    archive_cache_dir: Path = Path(APT_ARCHIVE_CACHE_DIR)
    binary_base_url: str = DEFAULT_BINARY_BASE_URL

    work_dir: Path = Field(default_factory=Path.cwd)
    log_file: Optional[Path] = None
    backup_dir: Optional[Path] = None
    download_dir: Optional[Path] = None
    lock_file: Optional[Path] = None

    echo: bool = True
    settle_delay: float = Field(default=SERVICE_SETTLE_DELAY, ge=0)
    command_timeout: Optional[float] = Field(default=None, gt=0)
    download_timeout: float = Field(default=DEFAULT_DOWNLOAD_TIMEOUT, gt=0)
    start_stopped_service: bool = True
    log_level: str = DEFAULT_DIAGNOSTIC_LEVEL

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in DIAGNOSTIC_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level

    @field_validator("package_name", "service_name", "program_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value or "/" in value or value.strip() != value:
            raise ValueError(f"invalid name '{value}'")
        return value

    @model_validator(mode="after")
    def _derive_paths(self) -> "UpdaterSettings":
        if self.log_file is None:
            self.log_file = self.work_dir / f"{self.program_name}{LOG_FILE_SUFFIX}"
        if self.lock_file is None:
            self.lock_file = self.work_dir / f"{self.program_name}{LOCK_FILE_SUFFIX}"
        if self.backup_dir is None:
            self.backup_dir = self.work_dir / BACKUP_DIR_NAME
        if self.download_dir is None:
            self.download_dir = self.work_dir
        return self

    @property
    def archive_glob(self) -> str:
        """Pattern of the cached archives belonging to the managed package."""
        return f"{self.package_name}*.deb"


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    logger.info(f"Loading updater configuration from: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Configuration file parsing error: {e}")
    except OSError as e:
        raise ConfigurationError(f"Configuration file cannot be read: {e}")

    # An empty file parses to None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: expected a mapping at top level"
        )
    return config


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name in UpdaterSettings.model_fields:
        key = f"{ENV_PREFIX}{name.upper()}"
        if key in environ:
            values[name] = environ[key]
    return values


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    program_path: Optional[Path] = None,
) -> UpdaterSettings:
    """
    Build the settings for a run.

    Args:
        config_path: YAML file; falls back to $JENKINS_UPDATER_CONFIG
        environ: Environment mapping (defaults to os.environ)
        overrides: Values from the command line, None entries are ignored
        program_path: Path of the running program; names the log and lock
            files and places them beside it

    Raises:
        ConfigurationError: When the file or any value is invalid
    """
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    if program_path is not None:
        data["program_name"] = program_path.name
        data["work_dir"] = program_path.resolve().parent

    if config_path is None and environ.get(CONFIG_ENV_VAR):
        config_path = Path(environ[CONFIG_ENV_VAR])
    if config_path is not None:
        data.update(_read_config_file(Path(config_path)))

    data.update(_read_environment(environ))
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        settings = UpdaterSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid updater settings: {e}")

    logger.debug(f"Resolved settings: {settings.model_dump()}")
    return settings
