"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from wazuh_provisioner.core.models import HostProfile, PackageDescriptor, InstallOutcome
"""

from wazuh_provisioner.core.models.host import Architecture, Distribution, HostProfile
from wazuh_provisioner.core.models.outcome import InstallOutcome, Stage
from wazuh_provisioner.core.models.package import (
    LegacyOverride,
    PackageDescriptor,
    PackageExtension,
    PackageTable,
)

__all__ = [
    # host.py
    "Architecture",
    "Distribution",
    "HostProfile",
    # outcome.py
    "InstallOutcome",
    # package.py
    "LegacyOverride",
    "PackageDescriptor",
    "PackageExtension",
    "PackageTable",
    "Stage",
]
