"""
Smoke tests — verify the bootstrap is healthy.

These tests ensure the basic scaffolding works:
- Package imports successfully
- CLI entrypoint responds
- Version is set
- Bundled package table ships with the package
"""

from click.testing import CliRunner

from wazuh_provisioner import __version__
from wazuh_provisioner.main import cli


class TestBootstrap:
    """Verify the project bootstrap is healthy."""

    def test_version_is_set(self):
        assert __version__
        assert isinstance(__version__, str)

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("install", "check", "detect", "resolve", "tools"):
            assert command in result.output

    def test_install_help_lists_exit_codes(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["install", "--help"])
        assert result.exit_code == 0
        assert "Exit codes" in result.output

    def test_bundled_table_present(self):
        from wazuh_provisioner.core.data import DEFAULT_PACKAGE_TABLE

        assert DEFAULT_PACKAGE_TABLE.is_file()

    def test_core_package_imports(self):
        """Core sub-packages should be importable."""
        import wazuh_provisioner.adapters
        import wazuh_provisioner.adapters.mock
        import wazuh_provisioner.core.config.loader
        import wazuh_provisioner.core.data
        import wazuh_provisioner.core.models
        import wazuh_provisioner.core.observability.logging_config
        import wazuh_provisioner.core.services.environment
        import wazuh_provisioner.core.services.package_resolver
        import wazuh_provisioner.core.use_cases.install  # noqa: F401
