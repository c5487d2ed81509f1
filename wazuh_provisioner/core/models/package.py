"""
Package models — the resolved artifact and the table it comes from.

``PackageDescriptor`` is what the resolver hands to the fetcher and
installer. ``PackageTable`` is the validated form of
``core/data/packages.yml``.

Note on extensions: ``PackageDescriptor.extension`` is the
distribution-level extension (``apk`` or ``rpm``) and only decides the
temporary download path. The install command is chosen from the
filename's own suffix (``filename_suffix``), which can be ``deb`` even
when ``extension`` says ``rpm``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wazuh_provisioner.core.models.host import Distribution


class PackageExtension(str, Enum):
    """Package file formats."""

    APK = "apk"
    RPM = "rpm"
    DEB = "deb"


DEBIAN_SUFFIX = ".deb"


class PackageDescriptor(BaseModel):
    """Resolved filename, extension and download URL for one host."""

    model_config = ConfigDict(frozen=True)

    filename: str
    extension: PackageExtension
    url: str

    @property
    def filename_suffix(self) -> str:
        """Extension taken from the filename itself (``deb``, ``rpm``, ``apk``)."""
        _, _, suffix = self.filename.rpartition(".")
        return suffix

    @property
    def is_debian_package(self) -> bool:
        """Whether the artifact must be installed with the Debian package tool."""
        return self.filename.endswith(DEBIAN_SUFFIX)

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "filename": self.filename,
            "extension": self.extension.value,
            "url": self.url,
        }


class LegacyOverride(BaseModel):
    """A pinned filename for one (distribution, version) pair."""

    distribution: Distribution
    version: str
    filename: str


class PackageTable(BaseModel):
    """Static lookup table for one pinned vendor release.

    Filenames may contain ``{version}`` and ``{release}`` placeholders
    which are substituted with the table's own values.
    """

    version: str
    release: str = "1"
    legacy_overrides: list[LegacyOverride] = Field(default_factory=list)
    filenames: dict[Distribution, str] = Field(default_factory=dict)
    default_filename: str
    extensions: dict[Distribution, PackageExtension] = Field(default_factory=dict)
    default_extension: PackageExtension = PackageExtension.RPM

    @model_validator(mode="after")
    def _check_templates(self) -> PackageTable:
        templates = [self.default_filename, *self.filenames.values()]
        templates += [o.filename for o in self.legacy_overrides]
        for template in templates:
            try:
                template.format(version=self.version, release=self.release)
            except (KeyError, IndexError, ValueError) as e:
                raise ValueError(f"Bad filename template {template!r}: {e}") from e
        return self

    def render(self, template: str) -> str:
        """Substitute the release placeholders in a filename template."""
        return template.format(version=self.version, release=self.release)
