"""deployforge data models — all Pydantic v2, all frozen (immutable)."""

from deployforge.models.artifacts import BuildArtifact, BuildMode
from deployforge.models.chain import (
    LAMPORTS_PER_SOL,
    UPGRADEABLE_LOADER_ID,
    OnChainProgramState,
)
from deployforge.models.identity import Identity
from deployforge.models.outcome import WorkflowOutcome
from deployforge.models.reports import PreconditionReport, StatusReport
from deployforge.models.stages import (
    STAGE_ORDER,
    VALID_TRANSITIONS,
    StageTransition,
    WorkflowKind,
    WorkflowStage,
)
from deployforge.models.targets import Commitment, DeploymentTarget
from deployforge.models.verification import (
    PLACEHOLDER_COMMIT,
    VerificationRequest,
    VerificationResult,
    VerificationStatus,
)

__all__ = [
    # targets
    "Commitment",
    "DeploymentTarget",
    # identity
    "Identity",
    # artifacts
    "BuildMode",
    "BuildArtifact",
    # chain
    "LAMPORTS_PER_SOL",
    "UPGRADEABLE_LOADER_ID",
    "OnChainProgramState",
    # stages
    "WorkflowKind",
    "WorkflowStage",
    "StageTransition",
    "VALID_TRANSITIONS",
    "STAGE_ORDER",
    # reports
    "PreconditionReport",
    "StatusReport",
    # verification
    "PLACEHOLDER_COMMIT",
    "VerificationRequest",
    "VerificationResult",
    "VerificationStatus",
    # outcome
    "WorkflowOutcome",
]
