"""
Archive downloads from the upstream binary repository.

Streams the archive to a ".part" file next to its destination and
renames it once complete, so an interrupted download never leaves a
file that looks installable.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests
from loguru import logger

from ..core.constants import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
    PARTIAL_DOWNLOAD_SUFFIX,
)
from ..core.exceptions import FetchFailure


class ArchiveDownloader:
    """Fetches archive files below a base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, filename: str) -> str:
        return self.base_url + quote(filename)

    def fetch(self, filename: str, dest_dir: Path) -> Path:
        """
        Download one archive.

        Args:
            filename: Archive file name below the base URL
            dest_dir: Directory receiving the file

        Returns:
            Path of the downloaded archive

        Raises:
            FetchFailure: On any network, HTTP or filesystem error
        """
        url = self.url_for(filename)
        dest_dir = Path(dest_dir)
        target = dest_dir / filename
        partial = dest_dir / f"{filename}{PARTIAL_DOWNLOAD_SUFFIX}"
        logger.info(f"Downloading {url} -> {target}")

        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(partial, "wb") as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            partial.replace(target)
        except (requests.RequestException, OSError) as e:
            partial.unlink(missing_ok=True)
            raise FetchFailure(
                f"Unable to retrieve package from {self.base_url}: {e}",
                remediation="Check the version exists upstream and the host can reach it",
            )

        logger.info(f"Downloaded {target} ({target.stat().st_size} bytes)")
        return target
