"""
Validation package.

Version token checks, version comparison and post-operation checks.
"""

from .post_upgrade_validator import PostUpgradeValidator
from .version_manager import archive_filename, compare_versions, validate_version_token

__all__ = [
    "PostUpgradeValidator",
    "archive_filename",
    "compare_versions",
    "validate_version_token",
]
