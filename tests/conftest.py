"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from typing import Callable

import pytest

from wazuh_provisioner.core.config.loader import ProvisionerConfig


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def write_os_release(tmp_path: Path) -> Callable[..., Path]:
    """Factory: write an os-release file and return its path.

    Values are quoted the way real distributions ship them.
    """

    def _write(dist_id: str, version_id: str | None = None, extra: str = "") -> Path:
        lines = [f'NAME="{dist_id.capitalize()} Linux"', f"ID={dist_id}"]
        if version_id is not None:
            lines.append(f'VERSION_ID="{version_id}"')
        path = tmp_path / "os-release"
        path.write_text("\n".join(lines) + "\n" + extra, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    """Directory standing in for /tmp during install runs."""
    d = tmp_path / "downloads"
    d.mkdir()
    return d


@pytest.fixture
def make_config(download_dir: Path) -> Callable[..., ProvisionerConfig]:
    """Factory: config pointed at a test os-release and download dir."""

    def _make(os_release: Path, **overrides) -> ProvisionerConfig:
        settings = {"os_release_path": str(os_release), "download_dir": str(download_dir)}
        settings.update(overrides)
        return ProvisionerConfig(**settings)

    return _make
