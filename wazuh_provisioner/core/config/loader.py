"""
Configuration loader — reads the provisioner YAML into a typed model.

The config file is optional. When none is found every setting keeps its
built-in default, which matches a stock Wazuh 4.x install on a Linux
host with ``which``, ``curl`` and ``sudo`` on the PATH.

Lookup order:
    explicit ``--config`` path  >  ``WAP_CONFIG`` env var  >  /etc/wazuh-provisioner/config.yml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from wazuh_provisioner.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "WAP_CONFIG"
SYSTEM_CONFIG_FILE = Path("/etc/wazuh-provisioner/config.yml")


class Timeouts(BaseModel):
    """Per-command timeouts in seconds."""

    lookup: int = Field(default=10, gt=0)
    download: int = Field(default=600, gt=0)
    sudo: int = Field(default=120, gt=0)
    install: int = Field(default=900, gt=0)


class ProvisionerConfig(BaseModel):
    """All tunable settings."""

    vendor_host: str = "packages.wazuh.com"
    release_line: str = "4.x"
    control_tool: str = "wazuhctl"

    os_release_path: str = "/etc/os-release"
    download_dir: str = "/tmp"
    download_basename: str = "wazuh-agent"
    package_table: str | None = None

    lookup_tool: str = "which"
    download_tool: str = "curl"
    sudo_tool: str = "sudo"

    timeouts: Timeouts = Field(default_factory=Timeouts)

    def download_path(self, extension: str) -> Path:
        """Fixed temporary path for a package with the given extension."""
        return Path(self.download_dir) / f"{self.download_basename}.{extension}"

    @property
    def package_table_path(self) -> Path | None:
        return Path(self.package_table) if self.package_table else None


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Return the config file to use, or None to run with defaults.

    An explicit path is returned as-is even if it does not exist, so
    that ``load_config`` can report it.
    """
    if explicit is not None:
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    if SYSTEM_CONFIG_FILE.is_file():
        return SYSTEM_CONFIG_FILE

    return None


def load_config(path: Path | None = None) -> ProvisionerConfig:
    """Load and validate the provisioner configuration.

    Args:
        path: Explicit config path. If None, the lookup order applies.

    Returns:
        Validated ProvisionerConfig (defaults if no file is found).

    Raises:
        ConfigError: If a named file is missing or invalid.
    """
    path = find_config_file(path)
    if path is None:
        logger.debug("No config file found, using defaults")
        return ProvisionerConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under a "provisioner" key or be flat
    if "provisioner" in data and isinstance(data["provisioner"], dict):
        data = data["provisioner"]

    try:
        config = ProvisionerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid provisioner configuration: {e}") from e

    logger.info("Loaded config from %s", path)
    return config
