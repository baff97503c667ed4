"""
Jenkins package update and rollback.

Updates the local Jenkins installation from the configured apt
repository, or rolls it back to a given version fetched from the
upstream binary repository. Meant to be run from cron or by hand.
Every run is recorded in a log file named after the program, next to
it, with lines like:

    20160331 211001 SUCCESS   - Jenkins server is running!

Exit code 0 on success, 1 on any failure.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .config import UpdaterSettings, load_settings
from .core.constants import (
    DEFAULT_DIAGNOSTIC_LEVEL,
    DEFAULT_PROGRAM_NAME,
    DIAGNOSTIC_FORMAT,
    LOG_FILE_SUFFIX,
    RUN_SEPARATOR,
)
from .core.dataclasses import RunResult
from .core.enums import OperationMode
from .core.exceptions import BadArguments, ConcurrentRunError, ConfigurationError, LoggerMisuse
from .host.command_runner import CommandRunner
from .host.downloader import ArchiveDownloader
from .host.package_manager import AptPackageManager
from .host.service_controller import SystemdServiceController
from .progress.run_log import RunLog
from .upgrade.package_updater import PackageUpdater
from .upgrade.rollback_manager import RollbackManager
from .upgrade.workflow import Workflow, error_line
from .utils.run_lock import RunLock

USAGE = """Usage: {prog} {{update|rollback}} [version]
The script accepts one or two parameters only; these are
  update - the script will update local Jenkins installation via apt-get
  rollback - the script will rollback the Jenkins package to a version
             specified by the second argument
  version - only required for the rollback option; must be a version
            string that apt-get understands

Options:
  --config PATH      YAML settings file
  --quiet            do not echo log lines to the screen
  --log-level LEVEL  diagnostic output level on stderr

Examples:
   {prog} update
   {prog} rollback 1.652
"""


# =============================================================================
# SECTION 1: LOGGING CONFIGURATION
# =============================================================================


def configure_logging(level: str = DEFAULT_DIAGNOSTIC_LEVEL) -> None:
    """Send diagnostics to stderr; run record lines have their own sinks."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=DIAGNOSTIC_FORMAT,
        filter=lambda record: "run_log" not in record["extra"],
    )


# =============================================================================
# SECTION 2: ARGUMENT PARSING
# =============================================================================


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as BadArguments instead of exiting 2."""

    def error(self, message):
        raise BadArguments(message)


def build_parser(prog: str) -> UsageParser:
    parser = UsageParser(
        prog=prog,
        add_help=False,
        usage="%(prog)s [options] {update|rollback} [version]",
        description="Update or roll back the Jenkins package.",
    )
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--quiet", action="store_true")
    parser.add_argument("--log-level", dest="log_level", default=None)
    parser.add_argument("params", nargs="*")
    return parser


def parse_operation(params: List[str]) -> Tuple[OperationMode, Optional[str]]:
    """
    Accepts exactly `update` or `rollback <version>`.

    Raises:
        BadArguments: For any other form
    """
    if params == [OperationMode.UPDATE.value]:
        return OperationMode.UPDATE, None
    if len(params) == 2 and params[0] == OperationMode.ROLLBACK.value:
        return OperationMode.ROLLBACK, params[1]
    raise BadArguments(f"Unsupported parameters: {' '.join(params) or '(none)'}")


def program_path_from(argv0: Optional[str]) -> Path:
    path = Path(argv0 or DEFAULT_PROGRAM_NAME)
    if path.name in ("__main__.py", ""):
        return Path.cwd() / DEFAULT_PROGRAM_NAME
    return path


# =============================================================================
# SECTION 3: WORKFLOW CONSTRUCTION
# =============================================================================


def build_workflow(
    mode: OperationMode,
    version: Optional[str],
    settings: UpdaterSettings,
    run_log: RunLog,
) -> Workflow:
    runner = CommandRunner(timeout=settings.command_timeout)
    packages = AptPackageManager(runner, settings.package_name)
    service = SystemdServiceController(
        runner, settings.service_name, settle_delay=settings.settle_delay
    )

    if mode is OperationMode.UPDATE:
        return PackageUpdater(settings, run_log, packages, service)

    downloader = ArchiveDownloader(settings.binary_base_url, timeout=settings.download_timeout)
    return RollbackManager(settings, run_log, packages, service, downloader, version)


def execute_operation(
    mode: OperationMode,
    version: Optional[str],
    settings: UpdaterSettings,
    run_log: RunLog,
) -> int:
    """Run one workflow under the run lock and map its outcome to an exit code."""
    try:
        with RunLock(settings.lock_file):
            result: RunResult = build_workflow(mode, version, settings, run_log).execute()
    except ConcurrentRunError as e:
        run_log.error(error_line(e.message))
        return 1

    logger.info(
        f"{mode.value} finished: success={result.success} state={result.state.value} "
        f"duration={result.duration:.1f}s"
    )
    return 0 if result.success else 1


# =============================================================================
# SECTION 4: RUN LOG
# =============================================================================


def open_run_log(path: Path, echo: bool) -> Optional[RunLog]:
    run_log = RunLog(path, echo=echo)
    try:
        run_log.open()
    except OSError as e:
        print(f"Unable to open log file {path}: {e}", file=sys.stderr)
        return None
    return run_log


def start_run(run_log: RunLog) -> None:
    run_log.info(RUN_SEPARATOR)
    run_log.info("New run:")


def record_configuration_error(program_path: Path) -> int:
    """Log a settings failure to the default log beside the program; returns 1."""
    log_file = program_path.resolve().parent / f"{program_path.name}{LOG_FILE_SUFFIX}"
    run_log = open_run_log(log_file, echo=False)
    if run_log is None:
        return 1
    try:
        start_run(run_log)
        run_log.error(error_line("Invalid updater settings"))
    finally:
        run_log.close()
    return 1


# =============================================================================
# SECTION 5: MAIN EXECUTION FUNCTION
# =============================================================================


def main(argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    program_path = program_path_from(prog or sys.argv[0])
    parser = build_parser(program_path.name)

    parse_error = None
    try:
        args = parser.parse_args(argv)
    except BadArguments as e:
        args, parse_error = None, e

    overrides = {}
    if args is not None:
        overrides = {"log_level": args.log_level, "echo": False if args.quiet else None}

    configure_logging()
    try:
        settings = load_settings(
            config_path=args.config if args is not None else None,
            overrides=overrides,
            program_path=program_path,
        )
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return record_configuration_error(program_path)
    configure_logging(settings.log_level)

    run_log = open_run_log(settings.log_file, echo=settings.echo)
    if run_log is None:
        return 1

    try:
        start_run(run_log)

        try:
            if parse_error is not None:
                raise parse_error
            mode, version = parse_operation(args.params)
        except BadArguments as e:
            logger.debug(f"Bad arguments: {e.message}")
            run_log.error("Parameter(s) is/are wrong. Exiting...")
            print(USAGE.format(prog=program_path.name))
            return 1

        return execute_operation(mode, version, settings, run_log)

    except LoggerMisuse as e:
        logger.critical(e.message)
        print("Error calling the run log. Exiting...", file=sys.stderr)
        return 1
    finally:
        run_log.close()


if __name__ == "__main__":
    sys.exit(main())
