"""
Single-run guard.

Holds an exclusive, non-blocking flock on a lock file for the duration
of a workflow so two runs never touch the package at the same time.
The lock is released by the kernel if the process dies.
"""

import fcntl
import os
from pathlib import Path
from typing import Optional

from loguru import logger

from ..core.exceptions import ConcurrentRunError


class RunLock:
    """Context manager around an exclusive flock."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fd: Optional[int] = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> "RunLock":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            raise ConcurrentRunError(
                f"Another run is in progress (lock held on {self.path})",
                remediation="Wait for the other run to finish",
            )

        os.ftruncate(fd, 0)
        os.write(fd, f"{os.getpid()}\n".encode())
        self._fd = fd
        logger.debug(f"Acquired run lock {self.path}")
        return self

    def release(self) -> None:
        if self._fd is None:
            return
        fcntl.flock(self._fd, fcntl.LOCK_UN)
        os.close(self._fd)
        self._fd = None
        logger.debug(f"Released run lock {self.path}")

    def __enter__(self) -> "RunLock":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
