"""
Native package installer — dpkg for .deb files, rpm for everything else.

The command is chosen from the package *filename*, never from the
distribution-level extension: Debian-family hosts download to
``wazuh-agent.rpm`` (the extension table says ``rpm``) but the file is
still a .deb and must go through dpkg.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from wazuh_provisioner.adapters.base import Escalator, PackageInstaller, Runner
from wazuh_provisioner.adapters.shell.command import run_command
from wazuh_provisioner.core.errors import InstallationError
from wazuh_provisioner.core.models.package import DEBIAN_SUFFIX, PackageDescriptor

logger = logging.getLogger(__name__)

DEBIAN_INSTALL = ["dpkg", "-i"]
RPM_INSTALL = ["rpm", "-Uvh"]


def select_install_command(filename: str, path: Path) -> list[str]:
    """Return the install argv for a package file (without elevation)."""
    base = DEBIAN_INSTALL if filename.endswith(DEBIAN_SUFFIX) else RPM_INSTALL
    return [*base, str(path)]


def discard_download(path: Path) -> bool:
    """Best-effort removal of the downloaded package.

    Returns True if the file was removed. Failures are logged and
    swallowed: cleanup must never replace the install result.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.debug("Could not remove %s: %s", path, e)
        return False
    logger.debug("Removed %s", path)
    return True


class NativePackageInstaller(PackageInstaller):
    """Install through dpkg or rpm, elevated by an ``Escalator``."""

    def __init__(
        self,
        escalator: Escalator,
        *,
        timeout: int = 900,
        runner: Runner = run_command,
    ):
        self._escalator = escalator
        self._timeout = timeout
        self._runner = runner

    @property
    def name(self) -> str:
        return "install"

    def is_available(self) -> bool:
        return any(shutil.which(cmd[0]) for cmd in (DEBIAN_INSTALL, RPM_INSTALL))

    def install_package(self, package: PackageDescriptor, path: Path) -> None:
        command = select_install_command(package.filename, path)
        argv = self._escalator.wrap(command)
        logger.info("Installing %s with %s", package.filename, command[0])

        result = self._runner(argv, timeout=self._timeout)
        if not result.ok:
            logger.debug("Install failed: %s", result.describe_failure())
            raise InstallationError(
                f"Failed to install Wazuh agent package ({result.describe_failure()})."
            )
        logger.info("Installed %s in %dms", package.filename, result.elapsed_ms)
