"""
Adapter registry — one place to build, swap and inspect host tool adapters.

The install use case receives a registry and pulls its four adapters
from it by role. Tests register fakes under the same names; the CLI
``tools`` command reports availability from here.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from wazuh_provisioner.adapters.base import (
    Escalator,
    Fetcher,
    PackageInstaller,
    PresenceChecker,
    ToolAdapter,
)
from wazuh_provisioner.core.config.loader import ProvisionerConfig

logger = logging.getLogger(__name__)

_A = TypeVar("_A", bound=ToolAdapter)


class AdapterRegistry:
    """Registry of host tool adapters, keyed by adapter name."""

    def __init__(self) -> None:
        self._adapters: dict[str, ToolAdapter] = {}

    def register(self, adapter: ToolAdapter) -> None:
        """Register an adapter, replacing any previous one with that name."""
        name = adapter.name
        if name in self._adapters:
            logger.debug("Replacing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s (%s)", name, adapter.__class__.__name__)

    def unregister(self, name: str) -> None:
        """Remove an adapter from the registry."""
        self._adapters.pop(name, None)

    def get(self, name: str) -> ToolAdapter | None:
        """Look up an adapter by name."""
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def _require(self, name: str, kind: type[_A]) -> _A:
        adapter = self._adapters.get(name)
        if adapter is None:
            raise LookupError(f"No adapter registered for '{name}'")
        if not isinstance(adapter, kind):
            raise TypeError(f"Adapter '{name}' is {type(adapter).__name__}, expected {kind.__name__}")
        return adapter

    # ── Roles ──────────────────────────────────────────────────────

    @property
    def presence(self) -> PresenceChecker:
        return self._require("lookup", PresenceChecker)

    @property
    def fetcher(self) -> Fetcher:
        return self._require("fetch", Fetcher)

    @property
    def escalator(self) -> Escalator:
        return self._require("elevate", Escalator)

    @property
    def installer(self) -> PackageInstaller:
        return self._require("install", PackageInstaller)

    # ── Status ─────────────────────────────────────────────────────

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered adapters."""
        status: dict[str, dict[str, Any]] = {}
        for name, adapter in self._adapters.items():
            try:
                available = adapter.is_available()
            except Exception as e:
                logger.debug("Availability check for %s raised: %s", name, e)
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": adapter.__class__.__name__,
                "tool": getattr(adapter, "tool", None),
            }
        return status


def build_registry(config: ProvisionerConfig | None = None) -> AdapterRegistry:
    """Registry wired to the real host tools named in ``config``."""
    from wazuh_provisioner.adapters.http.curl import CurlFetcher
    from wazuh_provisioner.adapters.packages.native import NativePackageInstaller
    from wazuh_provisioner.adapters.privilege.sudo import SudoEscalator
    from wazuh_provisioner.adapters.shell.lookup import PathLookupAdapter

    config = config or ProvisionerConfig()
    timeouts = config.timeouts

    escalator = SudoEscalator(config.sudo_tool, timeout=timeouts.sudo)

    registry = AdapterRegistry()
    registry.register(PathLookupAdapter(config.lookup_tool, timeout=timeouts.lookup))
    registry.register(CurlFetcher(config.download_tool, timeout=timeouts.download))
    registry.register(escalator)
    registry.register(NativePackageInstaller(escalator, timeout=timeouts.install))
    return registry
