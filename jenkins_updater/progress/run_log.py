"""
Run record writer.

Appends timestamped, severity-tagged lines to the run log file and
optionally echoes them to the screen. Lines look like:

    20160331 211001 ERROR message

Built on loguru: the file sink is opened in append mode with line
buffering, so every record lands in the file with one write.
"""

import sys
import uuid
from pathlib import Path
from typing import List, Optional, TextIO, Union

from loguru import logger

from ..core.constants import ACTION_LEVEL_NO, RUN_RECORD_FORMAT
from ..core.enums import Severity
from ..core.exceptions import LoggerMisuse


def register_levels() -> None:
    """Register the ACTION level with loguru (SUCCESS/INFO/ERROR are built in)."""
    try:
        logger.level(Severity.ACTION.value)
    except ValueError:
        logger.level(Severity.ACTION.value, no=ACTION_LEVEL_NO)


register_levels()


class RunLog:
    """
    Append-only run record for one invocation.

    Echo to the screen is a per-instance setting. The one-time
    "File created." header goes to the file only.
    """

    def __init__(self, path: Path, echo: bool = True, stream: Optional[TextIO] = None):
        self.path = Path(path)
        self.echo = echo
        self.stream = stream
        self._token = uuid.uuid4().hex
        self._handler_ids: List[int] = []
        self._logger = logger.bind(run_log=self._token)

    def _owns(self, record) -> bool:
        return record["extra"].get("run_log") == self._token

    def _owns_echo(self, record) -> bool:
        return self._owns(record) and record["extra"].get("echo", True)

    @property
    def is_open(self) -> bool:
        return bool(self._handler_ids)

    def open(self) -> "RunLog":
        if self.is_open:
            return self

        created = not self.path.exists()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._handler_ids.append(
            logger.add(
                str(self.path),
                format=RUN_RECORD_FORMAT,
                filter=self._owns,
                level=0,
                mode="a",
                buffering=1,
                encoding="utf-8",
                colorize=False,
            )
        )
        if self.echo:
            self._handler_ids.append(
                logger.add(
                    self.stream or sys.stdout,
                    format=RUN_RECORD_FORMAT,
                    filter=self._owns_echo,
                    level=0,
                    colorize=False,
                )
            )

        if created:
            self._logger.bind(echo=False).log(Severity.INFO.value, "File created.")
        return self

    def close(self) -> None:
        for handler_id in self._handler_ids:
            logger.remove(handler_id)
        self._handler_ids = []

    def __enter__(self) -> "RunLog":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, severity: Union[Severity, str], message: str) -> None:
        """
        Append one line to the run record.

        Args:
            severity: A Severity member or its name
            message: Line body

        Raises:
            LoggerMisuse: On an unknown severity or a closed log
        """
        if isinstance(severity, Severity):
            level = severity
        elif isinstance(severity, str) and severity in Severity.__members__:
            level = Severity[severity]
        else:
            raise LoggerMisuse(f"Error calling the run log with severity {severity!r}")

        if not self.is_open:
            raise LoggerMisuse(f"Run log {self.path} is not open")

        self._logger.log(level.value, message)

    def info(self, message: str) -> None:
        self.log(Severity.INFO, message)

    def action(self, message: str) -> None:
        self.log(Severity.ACTION, message)

    def success(self, message: str) -> None:
        self.log(Severity.SUCCESS, message)

    def error(self, message: str) -> None:
        self.log(Severity.ERROR, message)
