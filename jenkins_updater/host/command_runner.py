"""
Blocking execution of host commands.

Every package manager and service supervisor call goes through
CommandRunner so that its outcome is captured as a CommandResult
and checked by the caller.
"""

import os
import subprocess
from typing import Dict, List, Optional

from loguru import logger

from ..core.dataclasses import CommandResult

COMMAND_NOT_FOUND = 127
COMMAND_TIMED_OUT = 124


class CommandRunner:
    """Runs commands to completion and returns their captured output."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, args: List[str], env: Optional[Dict[str, str]] = None) -> CommandResult:
        """
        Run a command and wait for it.

        Args:
            args: Program and arguments, no shell involved
            env: Extra environment variables merged over os.environ

        Returns:
            CommandResult; a missing program yields return code 127 and a
            timeout yields 124
        """
        logger.debug(f"Running: {' '.join(args)}")
        merged_env = {**os.environ, **env} if env else None

        try:
            completed = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                env=merged_env,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            logger.warning(f"Command not found: {args[0]} ({e})")
            return CommandResult(args=list(args), returncode=COMMAND_NOT_FOUND, stderr=str(e))
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {self.timeout}s: {' '.join(args)}")
            return CommandResult(
                args=list(args),
                returncode=COMMAND_TIMED_OUT,
                stderr=f"timed out after {self.timeout} seconds",
            )

        result = CommandResult(
            args=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug(f"Exit code {result.returncode}: {' '.join(args)}")
        return result
