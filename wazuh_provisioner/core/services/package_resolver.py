"""
Package resolver — HostProfile → PackageDescriptor.

Pure table lookups over ``core/data/packages.yml``:

1. Legacy overrides match (distribution, version) exactly and win.
   The architecture tag plays no part in them.
2. Otherwise the distribution's own filename, or the table default.
3. The extension depends on the distribution alone and can disagree
   with the filename (Debian-family filenames end in .deb while their
   extension is ``rpm``). The extension only names the temp file.
4. URL: ``https://<vendor-host>/<release-line>/<dist>/<version>/<arch>/<filename>``.
"""

from __future__ import annotations

import logging

from wazuh_provisioner.core.data import load_package_table
from wazuh_provisioner.core.models.host import Architecture, Distribution, HostProfile
from wazuh_provisioner.core.models.package import (
    PackageDescriptor,
    PackageExtension,
    PackageTable,
)

logger = logging.getLogger(__name__)

DEFAULT_VENDOR_HOST = "packages.wazuh.com"
DEFAULT_RELEASE_LINE = "4.x"


def get_package_name(
    distribution: Distribution,
    version: str,
    architecture: Architecture,
    table: PackageTable | None = None,
) -> str:
    """Filename of the agent package for a host.

    ``architecture`` is accepted for symmetry with the URL but does not
    change the result: the pinned release ships one filename per
    distribution.
    """
    table = table or load_package_table()

    for override in table.legacy_overrides:
        if override.distribution == distribution and override.version == version:
            return table.render(override.filename)

    template = table.filenames.get(distribution, table.default_filename)
    return table.render(template)


def get_package_extension(
    distribution: Distribution,
    table: PackageTable | None = None,
) -> PackageExtension:
    """Distribution-level package extension (``apk`` or ``rpm``).

    Not a reliable indicator of the file format; see
    ``PackageDescriptor.is_debian_package``.
    """
    table = table or load_package_table()
    return table.extensions.get(distribution, table.default_extension)


def build_package_url(
    host: HostProfile,
    filename: str,
    *,
    vendor_host: str = DEFAULT_VENDOR_HOST,
    release_line: str = DEFAULT_RELEASE_LINE,
) -> str:
    return (
        f"https://{vendor_host}/{release_line}/"
        f"{host.distribution.value}/{host.version}/{host.architecture.value}/{filename}"
    )


def resolve_package(
    host: HostProfile,
    table: PackageTable | None = None,
    *,
    vendor_host: str = DEFAULT_VENDOR_HOST,
    release_line: str = DEFAULT_RELEASE_LINE,
) -> PackageDescriptor:
    """Resolve the package filename, extension and URL for ``host``."""
    table = table or load_package_table()

    filename = get_package_name(host.distribution, host.version, host.architecture, table)
    extension = get_package_extension(host.distribution, table)
    url = build_package_url(host, filename, vendor_host=vendor_host, release_line=release_line)

    descriptor = PackageDescriptor(filename=filename, extension=extension, url=url)
    logger.info("Resolved %s", descriptor.url)
    return descriptor
