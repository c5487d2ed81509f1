"""
Provisioning errors — one exception type per failure kind.

Every component raises one of these; the install use case catches
``ProvisionError`` and turns it into a failed ``InstallOutcome``.
The CLI maps ``exit_code`` to the process exit status so callers can
script against the result instead of parsing text.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for all provisioning failures."""

    kind: str = "provision_error"
    label: str = "Provisioning error"
    exit_code: int = 1

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}" if self.message else self.label


class ConfigError(ProvisionError):
    """Raised when the provisioner configuration or package table is invalid."""

    kind = "config_error"
    label = "Configuration error"
    exit_code = 2


class DistributionDetectionError(ProvisionError):
    """OS release metadata is unreadable or names an unsupported distribution."""

    kind = "distribution_detection_error"
    label = "Distribution detection error"
    exit_code = 3


class ArchitectureDetectionError(ProvisionError):
    """The host CPU architecture is not one of the supported tags."""

    kind = "architecture_detection_error"
    label = "Architecture detection error"
    exit_code = 4


class DownloadError(ProvisionError):
    """The download utility is missing or the fetch failed."""

    kind = "download_error"
    label = "Download error"
    exit_code = 5


class SudoError(ProvisionError):
    """Elevated privileges could not be obtained."""

    kind = "sudo_error"
    label = "Sudo error"
    exit_code = 6


class InstallationError(ProvisionError):
    """The native package tool is missing or failed."""

    kind = "installation_error"
    label = "Installation error"
    exit_code = 7


class ProvisionIOError(ProvisionError):
    """Filesystem failure outside the other categories."""

    kind = "io_error"
    label = "IO error"
    exit_code = 8

    @classmethod
    def from_os_error(cls, err: OSError) -> ProvisionIOError:
        """Wrap an ``OSError`` without losing its message."""
        return cls(str(err))
