"""
curl fetcher — downloads the resolved package to the temp path.

Availability is probed by spawning ``curl`` with no arguments: only the
ability to start the process matters, not its exit status (bare
``curl`` exits 2 and prints a usage hint).
"""

from __future__ import annotations

import logging
from pathlib import Path

from wazuh_provisioner.adapters.base import Fetcher, Runner
from wazuh_provisioner.adapters.shell.command import run_command
from wazuh_provisioner.core.errors import DownloadError

logger = logging.getLogger(__name__)

# Availability probe should be quick whatever the download timeout is
_PROBE_TIMEOUT = 10


class CurlFetcher(Fetcher):
    """Download with ``curl -L <url> -o <dest>``.

    ``--fail`` turns HTTP errors into a non-zero exit instead of saving
    the error page as the package.
    """

    def __init__(
        self,
        download_tool: str = "curl",
        *,
        timeout: int = 600,
        runner: Runner = run_command,
    ):
        self._download_tool = download_tool
        self._timeout = timeout
        self._runner = runner

    @property
    def name(self) -> str:
        return "fetch"

    @property
    def tool(self) -> str:
        return self._download_tool

    def is_available(self) -> bool:
        result = self._runner([self._download_tool], timeout=_PROBE_TIMEOUT)
        return result.spawned

    def build_argv(self, url: str, dest: Path) -> list[str]:
        return [
            self._download_tool,
            "--fail",
            "--silent",
            "--show-error",
            "-L",
            url,
            "-o",
            str(dest),
        ]

    def fetch(self, url: str, dest: Path) -> None:
        if not self.is_available():
            raise DownloadError(f"{self._download_tool.capitalize()} is not installed.")

        logger.info("Downloading %s → %s", url, dest)
        result = self._runner(self.build_argv(url, dest), timeout=self._timeout)
        if not result.ok:
            logger.debug("Download failed: %s", result.describe_failure())
            raise DownloadError(
                f"Failed to download the Wazuh agent package ({result.describe_failure()})."
            )
        logger.info("Downloaded %s in %dms", dest, result.elapsed_ms)
