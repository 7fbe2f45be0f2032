"""Workflow stage models — linear transitions, no back-edges."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WorkflowKind(str, Enum):
    """Entry workflows sharing the build -> publish sequence."""

    DEPLOY = "deploy"
    UPGRADE = "upgrade"


class WorkflowStage(str, Enum):
    """Strict stage model for a deployment run."""

    INIT = "init"
    CONFIG_RESOLVED = "config_resolved"
    PRECONDITIONS_CHECKED = "preconditions_checked"
    BUILT = "built"
    PUBLISHED = "published"
    DONE = "done"
    FAILED = "failed"


# Valid stage transitions, enforced by WorkflowMachine.
# Terminal stages (DONE, FAILED) have no outgoing transitions.
VALID_TRANSITIONS: dict[WorkflowStage, set[WorkflowStage]] = {
    WorkflowStage.INIT: {WorkflowStage.CONFIG_RESOLVED, WorkflowStage.FAILED},
    WorkflowStage.CONFIG_RESOLVED: {WorkflowStage.PRECONDITIONS_CHECKED, WorkflowStage.FAILED},
    WorkflowStage.PRECONDITIONS_CHECKED: {WorkflowStage.BUILT, WorkflowStage.FAILED},
    WorkflowStage.BUILT: {WorkflowStage.PUBLISHED, WorkflowStage.FAILED},
    WorkflowStage.PUBLISHED: {WorkflowStage.DONE, WorkflowStage.FAILED},
    WorkflowStage.DONE: set(),  # terminal
    WorkflowStage.FAILED: set(),  # terminal
}

# Happy-path order, used for rendering.
STAGE_ORDER: list[WorkflowStage] = [
    WorkflowStage.INIT,
    WorkflowStage.CONFIG_RESOLVED,
    WorkflowStage.PRECONDITIONS_CHECKED,
    WorkflowStage.BUILT,
    WorkflowStage.PUBLISHED,
    WorkflowStage.DONE,
]

STAGE_DISPLAY_NAMES: dict[WorkflowStage, str] = {
    WorkflowStage.INIT: "Init",
    WorkflowStage.CONFIG_RESOLVED: "Configuration",
    WorkflowStage.PRECONDITIONS_CHECKED: "Prerequisites",
    WorkflowStage.BUILT: "Build",
    WorkflowStage.PUBLISHED: "Publish",
    WorkflowStage.DONE: "Done",
    WorkflowStage.FAILED: "Failed",
}


class StageTransition(BaseModel):
    """Records a single stage transition for the run summary."""

    model_config = ConfigDict(frozen=True)

    from_stage: WorkflowStage
    to_stage: WorkflowStage
    failed_stage: WorkflowStage | None = None  # populated when entering FAILED
    error: str | None = None
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
