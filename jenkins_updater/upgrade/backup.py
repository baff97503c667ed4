"""
Backup of cached package archives.

Copies the apt-cached archives of the managed package into the backup
directory before an update, preserving file attributes and skipping
files whose backup copy is already up to date.
"""

import shutil
from pathlib import Path

from loguru import logger

from ..core.dataclasses import BackupReport
from ..core.exceptions import BackupFailure


class ArchiveBackup:
    """Copies archives matching a glob from one directory into another."""

    def __init__(self, source_dir: Path, pattern: str, backup_dir: Path):
        self.source_dir = Path(source_dir)
        self.pattern = pattern
        self.backup_dir = Path(backup_dir)

    @staticmethod
    def _is_up_to_date(source: Path, destination: Path) -> bool:
        return (
            destination.exists()
            and destination.stat().st_mtime >= source.stat().st_mtime
        )

    def run(self) -> BackupReport:
        """
        Copy every matching archive.

        Raises:
            BackupFailure: When nothing matches or a copy fails
        """
        sources = sorted(p for p in self.source_dir.glob(self.pattern) if p.is_file())
        if not sources:
            raise BackupFailure(
                f"Unable to copy the current package to backup: no {self.pattern} "
                f"archive in {self.source_dir}",
                remediation="Keep the apt archive cache or copy the current archive manually",
            )

        report = BackupReport()
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            for source in sources:
                destination = self.backup_dir / source.name
                if self._is_up_to_date(source, destination):
                    logger.debug(f"Backup up to date: {destination}")
                    report.up_to_date.append(source.name)
                    continue
                shutil.copy2(source, destination)
                logger.info(f"Backed up {source} -> {destination}")
                report.copied.append(source.name)
        except OSError as e:
            raise BackupFailure(f"Unable to copy the current package to backup: {e}")

        return report
