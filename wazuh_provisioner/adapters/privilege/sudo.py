"""
sudo escalator — checks elevation before anything is installed.

``elevate()`` runs ``sudo -v`` which validates (or refreshes) the cached
credential without running a command. Doing this up front means a
missing credential fails cleanly instead of halfway through an install.

When the process already runs as root no sudo is involved at all.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import Callable

from wazuh_provisioner.adapters.base import Escalator, Runner
from wazuh_provisioner.adapters.shell.command import run_command
from wazuh_provisioner.core.errors import SudoError

logger = logging.getLogger(__name__)


def _current_euid() -> int:
    return os.geteuid()


class SudoEscalator(Escalator):
    """Elevate with ``sudo``."""

    def __init__(
        self,
        sudo_tool: str = "sudo",
        *,
        timeout: int = 120,
        runner: Runner = run_command,
        euid: Callable[[], int] = _current_euid,
    ):
        self._sudo_tool = sudo_tool
        self._timeout = timeout
        self._runner = runner
        self._euid = euid

    @property
    def name(self) -> str:
        return "elevate"

    @property
    def tool(self) -> str:
        return self._sudo_tool

    @property
    def is_root(self) -> bool:
        return self._euid() == 0

    def is_available(self) -> bool:
        return self.is_root or shutil.which(self._sudo_tool) is not None

    def elevate(self) -> None:
        if self.is_root:
            logger.debug("Running as root, no elevation needed")
            return

        result = self._runner([self._sudo_tool, "-v"], timeout=self._timeout)
        if not result.ok:
            logger.debug("Credential check failed: %s", result.describe_failure())
            raise SudoError("Sudo privileges are required for installation.")
        logger.info("Sudo credential validated")

    def wrap(self, argv: list[str]) -> list[str]:
        if self.is_root:
            return list(argv)
        return [self._sudo_tool, *argv]
