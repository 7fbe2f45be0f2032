"""Linear workflow state machine.

Enforces:
- Valid stage transitions only (VALID_TRANSITIONS table)
- No back-edges; DONE and FAILED are terminal
- Every transition recorded with a UTC timestamp
"""

from __future__ import annotations

import logging

from deployforge.models.stages import (
    VALID_TRANSITIONS,
    StageTransition,
    WorkflowKind,
    WorkflowStage,
)

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested stage transition is not valid."""


class WorkflowMachine:
    """Tracks one workflow run from INIT to DONE or FAILED.

    Parameters
    ----------
    workflow:
        Which entry workflow this machine belongs to (for log context).
    """

    def __init__(self, workflow: WorkflowKind) -> None:
        self.workflow = workflow
        self._stage = WorkflowStage.INIT
        self._transitions: list[StageTransition] = []
        self.failed_stage: WorkflowStage | None = None
        self.error: BaseException | None = None

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def stage(self) -> WorkflowStage:
        return self._stage

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self._stage]

    @property
    def transitions(self) -> list[StageTransition]:
        """Snapshot of recorded transitions, oldest first."""
        return list(self._transitions)

    def get_available_transitions(self) -> set[WorkflowStage]:
        return set(VALID_TRANSITIONS[self._stage])

    # ------------------------------------------------------------------
    # Transition logic
    # ------------------------------------------------------------------

    def advance(self, target: WorkflowStage) -> StageTransition:
        """Move to *target*, which must not be FAILED (use ``fail``)."""
        if target == WorkflowStage.FAILED:
            raise InvalidTransitionError("Use fail() to enter the failed stage.")
        return self._transition(target)

    def fail(self, stage: WorkflowStage, error: BaseException) -> StageTransition:
        """Record ``Failed(stage, error)`` where *stage* could not be reached."""
        record = self._transition(
            WorkflowStage.FAILED,
            failed_stage=stage,
            error=f"{type(error).__name__}: {error}",
        )
        self.failed_stage = stage
        self.error = error
        return record

    def _transition(
        self,
        target: WorkflowStage,
        *,
        failed_stage: WorkflowStage | None = None,
        error: str | None = None,
    ) -> StageTransition:
        allowed = VALID_TRANSITIONS.get(self._stage, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition {self.workflow.value} from {self._stage.value} "
                f"to {target.value}. Allowed: {sorted(s.value for s in allowed)}"
            )

        record = StageTransition(
            from_stage=self._stage,
            to_stage=target,
            failed_stage=failed_stage,
            error=error,
        )
        self._transitions.append(record)
        logger.debug(
            "%s: %s -> %s", self.workflow.value, self._stage.value, target.value
        )
        self._stage = target
        return record
