"""
Static package data — the pinned vendor package table.

The table ships as ``packages.yml`` next to this module. A different
file can be supplied (``package_table`` in the provisioner config) to
pin another vendor release without touching code.

Usage::

    from wazuh_provisioner.core.data import load_package_table

    table = load_package_table()           # bundled table
    table = load_package_table(Path(...))  # alternate table
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from wazuh_provisioner.core.errors import ConfigError
from wazuh_provisioner.core.models.package import PackageTable

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent

DEFAULT_PACKAGE_TABLE = _DATA_DIR / "packages.yml"


def load_package_table(path: Path | None = None) -> PackageTable:
    """Load and validate a package table.

    Args:
        path: YAML file to load. Defaults to the bundled table.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    return _load_cached((path or DEFAULT_PACKAGE_TABLE).resolve())


@lru_cache(maxsize=8)
def _load_cached(path: Path) -> PackageTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read package table {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        table = PackageTable.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid package table {path}: {e}") from e

    logger.debug(
        "Loaded package table %s (release %s-%s, %d overrides)",
        path, table.version, table.release, len(table.legacy_overrides),
    )
    return table
