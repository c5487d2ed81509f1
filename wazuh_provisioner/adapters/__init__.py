"""Adapters — bindings for the host tools the provisioner shells out to.

Public re-exports for convenient access.
"""

from wazuh_provisioner.adapters.base import (
    CommandResult,
    Escalator,
    Fetcher,
    PackageInstaller,
    PresenceChecker,
    ToolAdapter,
)
from wazuh_provisioner.adapters.registry import AdapterRegistry, build_registry

__all__ = [
    "AdapterRegistry",
    "CommandResult",
    "Escalator",
    "Fetcher",
    "PackageInstaller",
    "PresenceChecker",
    "ToolAdapter",
    "build_registry",
]
