"""
Run record package.

Provides the append-only run log every workflow step reports to.
"""

from .run_log import RunLog, register_levels

__all__ = ["RunLog", "register_levels"]
