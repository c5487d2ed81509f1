"""
Wazuh agent provisioner — CLI entrypoint.

Usage:
    wazuh-provisioner --help
    wazuh-provisioner install
    wazuh-provisioner install --dry-run --json
    wazuh-provisioner resolve --distribution centos --version 5 --arch x86_64
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from wazuh_provisioner import __version__
from wazuh_provisioner.core.observability.logging_config import configure_cli_logging


def _load_config(ctx: click.Context):
    """Load the provisioner config, exiting with the config error code."""
    from wazuh_provisioner.core.config.loader import load_config
    from wazuh_provisioner.core.errors import ConfigError

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(e.exit_code)


def _registry(ctx: click.Context, config):
    """Adapter registry for this invocation (tests inject fakes via ctx.obj)."""
    registry = ctx.obj.get("registry")
    if registry is None:
        from wazuh_provisioner.adapters.registry import build_registry

        registry = build_registry(config)
    return registry


@click.group()
@click.version_option(version=__version__, prog_name="wazuh-provisioner")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: $WAP_CONFIG or /etc/wazuh-provisioner/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Wazuh agent provisioner — install the Wazuh agent on a Linux host."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    configure_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


# ── Install ─────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Detect and resolve only; download nothing.")
@click.pass_context
def install(ctx: click.Context, as_json: bool, dry_run: bool) -> None:
    """Install the Wazuh agent unless it is already present.

    Exit codes: 0 ok, 2 config, 3 distribution, 4 architecture,
    5 download, 6 sudo, 7 install, 8 I/O.
    """
    from wazuh_provisioner.core.models.outcome import Stage
    from wazuh_provisioner.core.use_cases.install import run_install

    config = _load_config(ctx)
    registry = _registry(ctx, config)
    quiet = ctx.obj.get("quiet", False)

    def progress(stage: Stage) -> None:
        if stage == Stage.DETECTING and not quiet:
            click.echo("Wazuh agent is not installed. Installing...")

    outcome = run_install(
        config,
        registry,
        dry_run=dry_run,
        on_stage=None if as_json else progress,
    )

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
        sys.exit(outcome.exit_code)

    if outcome.status == "already_installed":
        click.echo("Wazuh agent is already installed.")
        return

    if outcome.status == "failed":
        click.secho(f"Failed to install Wazuh agent: {outcome.error}", fg="red", err=True)
        sys.exit(outcome.exit_code)

    if outcome.status == "planned":
        if outcome.host is None or outcome.package is None:
            raise click.ClickException("Dry run finished without a resolved package.")
        click.secho("[dry-run] Nothing downloaded or installed.", fg="yellow")
        click.echo(f"   Host:     {_host_line(outcome.host)}")
        click.echo(f"   Package:  {outcome.package.filename}")
        click.echo(f"   URL:      {outcome.package.url}")
        click.echo(f"   Save to:  {outcome.download_path}")
        click.echo(f"   Command:  {' '.join(_install_command(outcome))}")
        return

    click.secho("Wazuh agent installed successfully.", fg="green")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Check whether the Wazuh agent is installed (exit 1 if not)."""
    from wazuh_provisioner.core.use_cases.install import check_installed

    config = _load_config(ctx)
    installed = check_installed(config, _registry(ctx, config))

    if as_json:
        click.echo(json.dumps({"installed": installed, "control_tool": config.control_tool}, indent=2))
    elif installed:
        click.echo("Wazuh agent is already installed.")
    else:
        click.echo("Wazuh agent is not installed.")

    if not installed:
        sys.exit(1)


# ── Inspect ─────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the detected distribution, version and architecture."""
    from wazuh_provisioner.core.errors import ProvisionError
    from wazuh_provisioner.core.services.environment import detect_host

    config = _load_config(ctx)
    try:
        host = detect_host(config.os_release_path)
    except ProvisionError as e:
        if as_json:
            click.echo(json.dumps({"error": {"kind": e.kind, "message": str(e)}}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(e.exit_code)

    if as_json:
        click.echo(json.dumps(host.to_dict(), indent=2))
        return

    click.echo(_host_line(host))


@cli.command()
@click.option("--distribution", "-d", default=None, help="Distribution ID (default: detected).")
@click.option("--version", "dist_version", default=None, help="Distribution VERSION_ID (default: detected).")
@click.option("--arch", "-a", default=None, help="Architecture tag (default: detected).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(
    ctx: click.Context,
    distribution: str | None,
    dist_version: str | None,
    arch: str | None,
    as_json: bool,
) -> None:
    """Show the package that would be downloaded.

    Any of --distribution/--version/--arch overrides the detected value.

    Examples:

        wazuh-provisioner resolve

        wazuh-provisioner resolve -d ubuntu --version 22.04 -a x86_64
    """
    from wazuh_provisioner.core.data import load_package_table
    from wazuh_provisioner.core.errors import ProvisionError
    from wazuh_provisioner.core.services.environment import host_with_overrides
    from wazuh_provisioner.core.services.package_resolver import resolve_package

    config = _load_config(ctx)
    try:
        host = host_with_overrides(
            config.os_release_path,
            distribution=distribution,
            version=dist_version,
            arch=arch,
        )
        package = resolve_package(
            host,
            load_package_table(config.package_table_path),
            vendor_host=config.vendor_host,
            release_line=config.release_line,
        )
    except ProvisionError as e:
        if as_json:
            click.echo(json.dumps({"error": {"kind": e.kind, "message": str(e)}}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(e.exit_code)

    download_path = config.download_path(package.extension.value)
    if as_json:
        click.echo(json.dumps({
            "host": host.to_dict(),
            "package": package.to_dict(),
            "download_path": str(download_path),
            "installer": "dpkg" if package.is_debian_package else "rpm",
        }, indent=2))
        return

    click.secho(f"📦 {package.filename}", fg="cyan", bold=True)
    click.echo(f"   Host:       {_host_line(host)}")
    click.echo(f"   URL:        {package.url}")
    click.echo(f"   Extension:  {package.extension.value} → {download_path}")
    click.echo(f"   Installer:  {'dpkg' if package.is_debian_package else 'rpm'}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def tools(ctx: click.Context, as_json: bool) -> None:
    """Show availability of the external tools the installer uses."""
    config = _load_config(ctx)
    status = _registry(ctx, config).adapter_status()

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    click.secho("🔧 Host tools:", fg="cyan", bold=True)
    for name, info in status.items():
        icon = "✅" if info["available"] else "❌"
        tool = f" ({info['tool']})" if info.get("tool") else ""
        click.echo(f"   {icon} {name}{tool}")


# ── Helpers ─────────────────────────────────────────────────────


def _host_line(host) -> str:
    return f"{host.distribution.value} {host.version or '?'} ({host.architecture.value})"


def _install_command(outcome) -> list[str]:
    from wazuh_provisioner.adapters.packages.native import select_install_command

    return select_install_command(outcome.package.filename, Path(outcome.download_path))


if __name__ == "__main__":
    cli()
