"""Result of one orchestrated workflow run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from deployforge.models.artifacts import BuildArtifact
from deployforge.models.reports import PreconditionReport
from deployforge.models.stages import StageTransition, WorkflowKind, WorkflowStage


class WorkflowOutcome(BaseModel):
    """Final state of a deploy or upgrade run.

    ``failed_stage`` names the stage the run could not reach, so a build
    failure reads ``Failed(built, BuildToolFailedError)``.
    """

    model_config = ConfigDict(frozen=True)

    workflow: WorkflowKind
    final_stage: WorkflowStage
    failed_stage: WorkflowStage | None = None
    error: str | None = None
    error_type: str | None = None
    program_address: str | None = None
    deployer_address: str | None = None
    network_endpoint: str | None = None
    artifact: BuildArtifact | None = None
    preconditions: PreconditionReport | None = None
    transitions: list[StageTransition] = []

    @property
    def succeeded(self) -> bool:
        return self.final_stage == WorkflowStage.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
