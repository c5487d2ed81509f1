"""
Tests for configuration loading — config.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from wazuh_provisioner.core.config import loader
from wazuh_provisioner.core.config.loader import (
    ConfigError,
    ProvisionerConfig,
    find_config_file,
    load_config,
)


@pytest.fixture
def no_system_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the system config at a path that does not exist."""
    monkeypatch.delenv("WAP_CONFIG", raising=False)
    monkeypatch.setattr(loader, "SYSTEM_CONFIG_FILE", tmp_path / "absent" / "config.yml")


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        vendor_host: mirror.example.org
        control_tool: wazuh-control
        download_dir: /var/tmp
        timeouts:
          download: 1200
    """)
    path = tmp_path / "config.yml"
    path.write_text(content)
    return path


class TestDefaults:
    def test_defaults(self):
        config = ProvisionerConfig()
        assert config.vendor_host == "packages.wazuh.com"
        assert config.release_line == "4.x"
        assert config.control_tool == "wazuhctl"
        assert config.os_release_path == "/etc/os-release"
        assert config.lookup_tool == "which"
        assert config.download_tool == "curl"
        assert config.sudo_tool == "sudo"
        assert config.package_table_path is None

    def test_download_path(self):
        assert ProvisionerConfig().download_path("rpm") == Path("/tmp/wazuh-agent.rpm")
        assert ProvisionerConfig().download_path("apk") == Path("/tmp/wazuh-agent.apk")

    def test_default_timeouts(self):
        t = ProvisionerConfig().timeouts
        assert (t.lookup, t.download, t.sudo, t.install) == (10, 600, 120, 900)


class TestLoadConfig:
    def test_no_file_gives_defaults(self, no_system_config):
        assert load_config() == ProvisionerConfig()

    def test_load_valid_config(self, valid_config_yml: Path):
        config = load_config(valid_config_yml)
        assert config.vendor_host == "mirror.example.org"
        assert config.control_tool == "wazuh-control"
        assert config.timeouts.download == 1200
        assert config.timeouts.install == 900
        assert config.download_path("rpm") == Path("/var/tmp/wazuh-agent.rpm")

    def test_wrapped_format(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("provisioner:\n  sudo_tool: doas\n")
        assert load_config(path).sudo_tool == "doas"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_config(path) == ProvisionerConfig()

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_invalid_timeout_raises(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("timeouts:\n  download: 0\n")
        with pytest.raises(ConfigError, match="Invalid provisioner configuration"):
            load_config(path)

    def test_config_error_exit_code(self, tmp_path: Path):
        with pytest.raises(ConfigError) as exc:
            load_config(tmp_path / "nonexistent.yml")
        assert exc.value.exit_code == 2


class TestFindConfigFile:
    def test_explicit_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WAP_CONFIG", "/elsewhere.yml")
        explicit = tmp_path / "mine.yml"
        assert find_config_file(explicit) == explicit

    def test_env_var(self, no_system_config, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WAP_CONFIG", "/srv/provisioner.yml")
        assert find_config_file() == Path("/srv/provisioner.yml")

    def test_system_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("WAP_CONFIG", raising=False)
        system = tmp_path / "config.yml"
        system.write_text("control_tool: x\n")
        monkeypatch.setattr(loader, "SYSTEM_CONFIG_FILE", system)
        assert find_config_file() == system
        assert load_config().control_tool == "x"

    def test_nothing_found(self, no_system_config):
        assert find_config_file() is None
