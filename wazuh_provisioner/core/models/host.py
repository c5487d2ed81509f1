"""
Host models — what the environment probe learns about the machine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Distribution(str, Enum):
    """Linux distributions the vendor publishes agent packages for."""

    ALPINE = "alpine"
    AMAZON = "amazon"
    CENTOS = "centos"
    DEBIAN = "debian"
    FEDORA = "fedora"
    OPENSUSE = "opensuse"
    ORACLE = "oracle"
    REDHAT = "redhat"
    SUSE = "suse"
    UBUNTU = "ubuntu"
    RASPBIAN = "raspbian"


class Architecture(str, Enum):
    """CPU architecture tags used in vendor download paths."""

    I386 = "i386"
    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    ARMHF = "armhf"
    POWERPC = "powerpc"


class HostProfile(BaseModel):
    """Distribution, version and architecture of the current host.

    Built once per run from ``/etc/os-release`` and the machine type.
    """

    model_config = ConfigDict(frozen=True)

    distribution: Distribution
    version: str = ""
    architecture: Architecture

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "distribution": self.distribution.value,
            "version": self.version,
            "architecture": self.architecture.value,
        }
