"""
Environment probe — which distribution, version and CPU is this?

Distribution and version come from ``/etc/os-release``. Architecture
comes from the machine type the interpreter runs on, never from the
release file.

Read-only. No subprocess.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from wazuh_provisioner.core.errors import ArchitectureDetectionError, DistributionDetectionError
from wazuh_provisioner.core.models.host import Architecture, Distribution, HostProfile

logger = logging.getLogger(__name__)

DEFAULT_OS_RELEASE = "/etc/os-release"

# Amazon Linux packages live under a single "latest" directory upstream,
# whatever VERSION_ID says.
_FIXED_VERSIONS: dict[Distribution, str] = {
    Distribution.AMAZON: "latest",
}

# platform.machine() value → vendor architecture tag
_ARCH_MAP: dict[str, Architecture] = {
    "i386": Architecture.I386,
    "i486": Architecture.I386,
    "i586": Architecture.I386,
    "i686": Architecture.I386,
    "x86": Architecture.I386,
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
    "arm": Architecture.ARMHF,
    "armv6l": Architecture.ARMHF,
    "armv7l": Architecture.ARMHF,
    "armv8l": Architecture.ARMHF,
    "armhf": Architecture.ARMHF,
    "ppc64": Architecture.POWERPC,
    "ppc64le": Architecture.POWERPC,
}


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release ``KEY=value`` lines.

    Surrounding quotes are stripped from values. Blank lines, comments
    and lines without ``=`` are skipped.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip().strip("\"'")
    return fields


def read_os_release(os_release_path: str | Path = DEFAULT_OS_RELEASE) -> dict[str, str]:
    """Read and parse an os-release file.

    Raises:
        DistributionDetectionError: If the file cannot be read.
    """
    path = Path(os_release_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        raise DistributionDetectionError(f"Failed to read {path}") from e
    return parse_os_release(text)


def parse_distribution(raw_id: str) -> Distribution:
    """Map an os-release ``ID`` to a supported distribution."""
    try:
        return Distribution(raw_id)
    except ValueError:
        raise DistributionDetectionError(
            f"Unsupported distribution: {raw_id!r}" if raw_id else "Unsupported distribution"
        ) from None


def effective_version(distribution: Distribution, version: str) -> str:
    """The version segment used in package URLs for this distribution."""
    return _FIXED_VERSIONS.get(distribution, version)


def get_distribution_and_version(
    os_release_path: str | Path = DEFAULT_OS_RELEASE,
) -> tuple[Distribution, str]:
    """Read the distribution ID and VERSION_ID from os-release.

    Raises:
        DistributionDetectionError: If the file cannot be read, or
            its ``ID`` is missing or not a supported distribution.
    """
    fields = read_os_release(os_release_path)
    raw_id = fields.get("ID", "")
    try:
        distribution = parse_distribution(raw_id)
    except DistributionDetectionError:
        logger.debug("Unrecognized distribution ID %r in %s", raw_id, os_release_path)
        raise

    version = effective_version(distribution, fields.get("VERSION_ID", ""))
    logger.debug("Distribution %s, version %r", distribution.value, version)
    return distribution, version


def get_architecture(machine: str | None = None) -> Architecture:
    """Map the host machine type to a vendor architecture tag.

    Args:
        machine: Override for ``platform.machine()`` (tests, cross-planning).

    Raises:
        ArchitectureDetectionError: For any machine type outside the map.
    """
    raw = machine if machine is not None else platform.machine()
    arch = _ARCH_MAP.get(raw.lower())
    if arch is None:
        raise ArchitectureDetectionError(
            f"Unsupported architecture: {raw!r}" if raw else "Unsupported architecture"
        )
    logger.debug("Architecture %s (machine=%s)", arch.value, raw)
    return arch


def detect_host(
    os_release_path: str | Path = DEFAULT_OS_RELEASE,
    machine: str | None = None,
) -> HostProfile:
    """Build the HostProfile for the current machine."""
    distribution, version = get_distribution_and_version(os_release_path)
    architecture = get_architecture(machine)
    host = HostProfile(distribution=distribution, version=version, architecture=architecture)
    logger.info(
        "Host: %s %s (%s)", host.distribution.value, host.version or "?", host.architecture.value,
    )
    return host


def host_with_overrides(
    os_release_path: str | Path = DEFAULT_OS_RELEASE,
    *,
    distribution: str | None = None,
    version: str | None = None,
    arch: str | None = None,
) -> HostProfile:
    """Build a HostProfile where any given field replaces the detected one.

    A given distribution is not checked against the host's own ID, so
    planning for another distribution works on unsupported hosts.
    os-release is only read when a value still has to come from it.
    Fixed versions (amazon → ``latest``) apply to the chosen distribution.

    Raises:
        DistributionDetectionError: Unknown distribution, or os-release
            needed but unreadable or unsupported.
        ArchitectureDetectionError: Unknown architecture tag or machine.
    """
    if distribution is None:
        dist, detected_version = get_distribution_and_version(os_release_path)
    else:
        dist = parse_distribution(distribution)
        detected_version = None

    if version is None:
        if detected_version is not None:
            version = detected_version
        elif dist in _FIXED_VERSIONS:
            version = ""
        else:
            version = read_os_release(os_release_path).get("VERSION_ID", "")
    version = effective_version(dist, version)

    if arch is None:
        architecture = get_architecture()
    else:
        try:
            architecture = Architecture(arch)
        except ValueError:
            raise ArchitectureDetectionError(f"Unsupported architecture: {arch!r}") from None

    return HostProfile(distribution=dist, version=version, architecture=architecture)
