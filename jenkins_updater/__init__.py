"""
Jenkins package update and rollback automation for Debian hosts.
"""

__version__ = "1.0.0"
