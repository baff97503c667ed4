"""
Utility helpers shared by the command line entry point.
"""

from .run_lock import RunLock

__all__ = ["RunLock"]
