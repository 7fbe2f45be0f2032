"""Report models — outputs of the precondition and status checks."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from deployforge.models.chain import OnChainProgramState, lamports_to_sol
from deployforge.models.stages import WorkflowKind


class PreconditionReport(BaseModel):
    """Gate between validation and the mutating steps.

    Warnings are advisory (low balance, unexpected owner) and do not stop
    the workflow.  Hard failures are raised, never reported here.
    """

    model_config = ConfigDict(frozen=True)

    workflow: WorkflowKind
    deployer_address: str
    balance_lamports: int
    min_balance_lamports: int
    program_state: OnChainProgramState | None = None
    warnings: list[str] = []
    checked_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def balance_sol(self) -> float:
        return lamports_to_sol(self.balance_lamports)

    @property
    def low_balance(self) -> bool:
        return self.balance_lamports < self.min_balance_lamports


class StatusReport(BaseModel):
    """Snapshot of deployer and program state on the target network."""

    model_config = ConfigDict(frozen=True)

    network_endpoint: str
    deployer_address: str
    deployer_lamports: int
    program_state: OnChainProgramState
    slot: int

    @property
    def deployer_balance_sol(self) -> float:
        return lamports_to_sol(self.deployer_lamports)
