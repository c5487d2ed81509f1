"""
Install use case — the provisioning state machine.

    checking_presence ─┬─ found ──────────────────────────────────────────▶ done
                       └─ detecting → resolving → downloading → escalating
                                      → installing → cleanup → done

Any stage that raises ends the run in ``failed``: no retries, no going
back. The downloaded file is removed after the install attempt whether
it succeeded or not; earlier failures leave the filesystem as it is.

All host interaction goes through the adapters in the registry, so the
whole sequence runs against fakes in tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Literal

from wazuh_provisioner.adapters.packages.native import discard_download
from wazuh_provisioner.adapters.registry import AdapterRegistry, build_registry
from wazuh_provisioner.core.config.loader import ProvisionerConfig
from wazuh_provisioner.core.data import load_package_table
from wazuh_provisioner.core.errors import ProvisionError, ProvisionIOError
from wazuh_provisioner.core.models.outcome import InstallOutcome, Stage, _now_iso
from wazuh_provisioner.core.services.environment import detect_host
from wazuh_provisioner.core.services.package_resolver import resolve_package

logger = logging.getLogger(__name__)


def check_installed(
    config: ProvisionerConfig | None = None,
    registry: AdapterRegistry | None = None,
) -> bool:
    """Whether the agent's control tool is already on the search path."""
    config = config or ProvisionerConfig()
    registry = registry or build_registry(config)
    return registry.presence.probe(config.control_tool)


def run_install(
    config: ProvisionerConfig | None = None,
    registry: AdapterRegistry | None = None,
    *,
    dry_run: bool = False,
    machine: str | None = None,
    on_stage: Callable[[Stage], None] | None = None,
) -> InstallOutcome:
    """Provision the agent on this host.

    Args:
        config: Provisioner settings (defaults if None).
        registry: Host tool adapters (real tools if None).
        dry_run: Stop after resolving the package; nothing is
            downloaded or installed.
        machine: Override for the detected machine type.
        on_stage: Called with each stage as it is entered (progress output).

    Returns:
        InstallOutcome. Never raises for provisioning failures; they
        are recorded with their kind and exit code.
    """
    config = config or ProvisionerConfig()
    registry = registry or build_registry(config)
    outcome = InstallOutcome()
    stage = Stage.CHECKING_PRESENCE

    def enter(next_stage: Stage) -> None:
        outcome.enter(next_stage)
        if on_stage is not None:
            on_stage(next_stage)

    try:
        enter(stage)
        if registry.presence.probe(config.control_tool):
            logger.info("%s found on PATH, nothing to do", config.control_tool)
            return _finish(outcome, "already_installed")

        stage = Stage.DETECTING
        enter(stage)
        outcome.host = detect_host(config.os_release_path, machine)

        stage = Stage.RESOLVING
        enter(stage)
        table = load_package_table(config.package_table_path)
        outcome.package = resolve_package(
            outcome.host,
            table,
            vendor_host=config.vendor_host,
            release_line=config.release_line,
        )
        download_path = config.download_path(outcome.package.extension.value)
        outcome.download_path = str(download_path)

        if dry_run:
            logger.info("Dry run: would fetch %s to %s", outcome.package.url, download_path)
            return _finish(outcome, "planned")

        stage = Stage.DOWNLOADING
        enter(stage)
        registry.fetcher.fetch(outcome.package.url, download_path)

        stage = Stage.ESCALATING
        enter(stage)
        registry.escalator.elevate()

        stage = Stage.INSTALLING
        enter(stage)
        try:
            registry.installer.install_package(outcome.package, download_path)
        finally:
            enter(Stage.CLEANUP)
            _cleanup(download_path)

        return _finish(outcome, "installed")

    except ProvisionError as e:
        return _fail(outcome, stage, e)
    except OSError as e:
        return _fail(outcome, stage, ProvisionIOError.from_os_error(e))


def _cleanup(path: Path) -> None:
    if discard_download(path):
        logger.info("Cleaned up %s", path)


def _finish(
    outcome: InstallOutcome,
    status: Literal["installed", "already_installed", "planned"],
) -> InstallOutcome:
    outcome.status = status
    outcome.enter(Stage.DONE)
    outcome.ended_at = _now_iso()
    return outcome


def _fail(outcome: InstallOutcome, stage: Stage, error: ProvisionError) -> InstallOutcome:
    logger.info("Provisioning failed during %s: %s", stage.value, error)
    outcome.status = "failed"
    outcome.failed_stage = stage
    outcome.error_kind = error.kind
    outcome.error = str(error)
    outcome.exit_code = error.exit_code
    outcome.enter(Stage.FAILED)
    outcome.ended_at = _now_iso()
    return outcome
