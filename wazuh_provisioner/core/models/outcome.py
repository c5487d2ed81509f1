"""
Install outcome — the result of one provisioning run.

The run is a strict sequence of stages. ``InstallOutcome.stages`` is
the path actually taken, ending in ``done`` or ``failed``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from wazuh_provisioner.core.models.host import HostProfile
from wazuh_provisioner.core.models.package import PackageDescriptor


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Stage(str, Enum):
    """Provisioning state machine stages."""

    CHECKING_PRESENCE = "checking_presence"
    DETECTING = "detecting"
    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    ESCALATING = "escalating"
    INSTALLING = "installing"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


class InstallOutcome(BaseModel):
    """What happened during a run.

    ``status`` values:
        installed          the package was downloaded and installed
        already_installed  the control tool was found; nothing was done
        planned            dry run stopped after resolving
        failed             a stage raised; see ``error_kind``
    """

    status: Literal["installed", "already_installed", "planned", "failed"] = "failed"
    stages: list[Stage] = Field(default_factory=list)

    host: HostProfile | None = None
    package: PackageDescriptor | None = None
    download_path: str | None = None

    failed_stage: Stage | None = None
    error_kind: str | None = None
    error: str | None = None
    exit_code: int = 0

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the run ended without a failure."""
        return self.status != "failed"

    def enter(self, stage: Stage) -> None:
        """Record a transition into ``stage``."""
        self.stages.append(stage)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "status": self.status,
            "stages": [s.value for s in self.stages],
            "exit_code": self.exit_code,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
        }
        if self.host:
            result["host"] = self.host.to_dict()
        if self.package:
            result["package"] = self.package.to_dict()
        if self.download_path:
            result["download_path"] = self.download_path
        if self.error:
            result["error"] = {
                "kind": self.error_kind,
                "stage": self.failed_stage.value if self.failed_stage else None,
                "message": self.error,
            }
        return result
