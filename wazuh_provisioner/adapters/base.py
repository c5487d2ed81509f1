"""
Adapter base — the contract between the install use case and host tools.

The use case never spawns processes itself. It talks to four adapters:

    PresenceChecker   probe(tool)               → bool, never raises
    Fetcher           fetch(url, dest)          → raises DownloadError
    Escalator         elevate() / wrap(argv)    → raises SudoError
    PackageInstaller  install_package(pkg, path) → raises InstallationError

Real implementations live under ``adapters/<concern>/``; test doubles
live in ``adapters/mock.py``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from wazuh_provisioner.core.models.package import PackageDescriptor


class CommandResult(BaseModel):
    """Outcome of one external process invocation.

    ``spawned`` is False when the executable could not be started at
    all (missing binary, permission denied). In that case ``returncode``
    is None and ``error`` holds the OS error text.
    """

    argv: list[str] = Field(default_factory=list)
    spawned: bool = True
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the process ran and exited 0."""
        return self.spawned and not self.timed_out and self.returncode == 0

    def describe_failure(self) -> str:
        """Short human-readable reason for a failed invocation."""
        if not self.spawned:
            return f"could not run {self.argv[0] if self.argv else '?'}: {self.error}"
        if self.timed_out:
            return self.error or "timed out"
        detail = self.stderr.strip().splitlines()[-1] if self.stderr.strip() else ""
        base = f"exit {self.returncode}"
        return f"{base}: {detail}" if detail else base


class Runner(Protocol):
    """Callable that runs an argv and returns a CommandResult."""

    def __call__(self, argv: list[str], *, timeout: int) -> CommandResult:
        ...


class ToolAdapter(ABC):
    """Abstract base class for all host tool adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'lookup', 'fetch')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool can be used. Must never raise."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PresenceChecker(ToolAdapter):
    """Finds out whether an executable is reachable on the search path."""

    @abstractmethod
    def probe(self, tool: str) -> bool:
        """Return True if ``tool`` is found. Never raises."""


class Fetcher(ToolAdapter):
    """Downloads a URL to a local file."""

    @abstractmethod
    def fetch(self, url: str, dest: Path) -> None:
        """Write the content of ``url`` to ``dest``, overwriting it.

        Raises:
            DownloadError: If the tool is missing or the fetch fails.
        """


class Escalator(ToolAdapter):
    """Obtains elevated privileges for later commands."""

    @abstractmethod
    def elevate(self) -> None:
        """Validate or refresh the elevation credential.

        Raises:
            SudoError: If elevation is not possible.
        """

    @abstractmethod
    def wrap(self, argv: list[str]) -> list[str]:
        """Return ``argv`` prefixed so that it runs elevated."""


class PackageInstaller(ToolAdapter):
    """Installs a downloaded package with the host's native tool."""

    @abstractmethod
    def install_package(self, package: PackageDescriptor, path: Path) -> None:
        """Install the file at ``path`` described by ``package``.

        Raises:
            InstallationError: If the package tool is missing or fails.
        """
