"""
Mock adapters — test doubles for every host tool role.

None of these spawn processes. Each records what it was asked to do in
``calls`` so tests can assert on order and arguments, and each can be
told to fail with the error its real counterpart would raise.

``RecordingRunner`` stands in for ``run_command`` when a test wants to
exercise a real adapter's argv construction without running anything.
"""

from __future__ import annotations

from pathlib import Path

from wazuh_provisioner.adapters.base import (
    CommandResult,
    Escalator,
    Fetcher,
    PackageInstaller,
    PresenceChecker,
)
from wazuh_provisioner.adapters.registry import AdapterRegistry
from wazuh_provisioner.core.errors import DownloadError, InstallationError, SudoError
from wazuh_provisioner.core.models.package import PackageDescriptor


class RecordingRunner:
    """Fake command runner with canned results per executable name.

    Executables listed in ``missing`` behave as if not on PATH.
    Anything without a canned result exits 0.
    """

    def __init__(
        self,
        results: dict[str, CommandResult] | None = None,
        missing: set[str] | None = None,
    ):
        self._results = results or {}
        self._missing = missing or set()
        self.calls: list[tuple[list[str], int]] = []

    def __call__(self, argv: list[str], *, timeout: int) -> CommandResult:
        self.calls.append((list(argv), timeout))
        exe = argv[0]
        if exe in self._missing:
            return CommandResult(argv=argv, spawned=False, error=f"No such file or directory: '{exe}'")
        if exe in self._results:
            return self._results[exe].model_copy(update={"argv": argv})
        return CommandResult(argv=argv, returncode=0)

    @property
    def argvs(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]


class FakePresence(PresenceChecker):
    """Presence checker that answers from a fixed set of installed tools."""

    def __init__(self, installed: set[str] | None = None, available: bool = True):
        self._installed = installed or set()
        self._available = available
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "lookup"

    def is_available(self) -> bool:
        return self._available

    def probe(self, tool: str) -> bool:
        self.calls.append(tool)
        return self._available and tool in self._installed


class FakeFetcher(Fetcher):
    """Fetcher that writes placeholder bytes instead of downloading."""

    def __init__(self, available: bool = True, fail: bool = False, content: bytes = b"package"):
        self._available = available
        self._fail = fail
        self._content = content
        self.calls: list[tuple[str, Path]] = []

    @property
    def name(self) -> str:
        return "fetch"

    def is_available(self) -> bool:
        return self._available

    def fetch(self, url: str, dest: Path) -> None:
        self.calls.append((url, dest))
        if not self._available:
            raise DownloadError("Curl is not installed.")
        if self._fail:
            raise DownloadError("Failed to download the Wazuh agent package.")
        dest.write_bytes(self._content)


class FakeEscalator(Escalator):
    """Escalator that grants or denies elevation on demand."""

    def __init__(self, granted: bool = True):
        self._granted = granted
        self.elevations = 0

    @property
    def name(self) -> str:
        return "elevate"

    def is_available(self) -> bool:
        return self._granted

    def elevate(self) -> None:
        self.elevations += 1
        if not self._granted:
            raise SudoError("Sudo privileges are required for installation.")

    def wrap(self, argv: list[str]) -> list[str]:
        return ["sudo", *argv]


class FakeInstaller(PackageInstaller):
    """Installer that records the package and path it was given."""

    def __init__(self, fail: bool = False):
        self._fail = fail
        self.calls: list[tuple[PackageDescriptor, Path]] = []

    @property
    def name(self) -> str:
        return "install"

    def is_available(self) -> bool:
        return True

    def install_package(self, package: PackageDescriptor, path: Path) -> None:
        self.calls.append((package, path))
        if self._fail:
            raise InstallationError("Failed to install Wazuh agent package.")


def fake_registry(
    *,
    presence: PresenceChecker | None = None,
    fetcher: Fetcher | None = None,
    escalator: Escalator | None = None,
    installer: PackageInstaller | None = None,
) -> AdapterRegistry:
    """Registry populated with fakes; pass an instance to override one role."""
    registry = AdapterRegistry()
    registry.register(presence or FakePresence())
    registry.register(fetcher or FakeFetcher())
    registry.register(escalator or FakeEscalator())
    registry.register(installer or FakeInstaller())
    return registry
