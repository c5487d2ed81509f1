"""
Path lookup adapter — is the agent's control tool already installed?
"""

from __future__ import annotations

import logging
import shutil

from wazuh_provisioner.adapters.base import PresenceChecker, Runner
from wazuh_provisioner.adapters.shell.command import run_command

logger = logging.getLogger(__name__)


class PathLookupAdapter(PresenceChecker):
    """Locate an executable by running the path-lookup tool (``which``).

    A missing lookup tool counts as "not installed", not as an error.
    """

    def __init__(
        self,
        lookup_tool: str = "which",
        *,
        timeout: int = 10,
        runner: Runner = run_command,
    ):
        self._lookup_tool = lookup_tool
        self._timeout = timeout
        self._runner = runner

    @property
    def name(self) -> str:
        return "lookup"

    @property
    def tool(self) -> str:
        return self._lookup_tool

    def is_available(self) -> bool:
        return shutil.which(self._lookup_tool) is not None

    def probe(self, tool: str) -> bool:
        result = self._runner([self._lookup_tool, tool], timeout=self._timeout)
        if not result.spawned:
            logger.info("Lookup tool %s unavailable, treating %s as absent", self._lookup_tool, tool)
            return False
        found = result.ok
        logger.debug("%s %s → %s", self._lookup_tool, tool, "found" if found else "not found")
        return found
