"""Precondition Checker — gates every mutating network step.

Balance is advisory: the exact fee is unknown until submission, so a low
balance produces a warning and the run continues.  Program existence,
executability and the local program keypair are hard requirements.
"""

from __future__ import annotations

import logging
from pathlib import Path

from deployforge.bridge.rpc import ChainReader
from deployforge.core.errors import (
    NotExecutableError,
    ProgramKeypairMissingError,
    ProgramNotFoundError,
)
from deployforge.models.chain import (
    LAMPORTS_PER_SOL,
    UPGRADEABLE_LOADER_ID,
    OnChainProgramState,
    lamports_to_sol,
)
from deployforge.models.identity import Identity
from deployforge.models.reports import PreconditionReport
from deployforge.models.stages import WorkflowKind
from deployforge.models.targets import DeploymentTarget

logger = logging.getLogger(__name__)


class PreconditionChecker:
    """Checks deployer funds and program state before build/publish.

    Parameters
    ----------
    chain:
        Read-only chain client bound to the run's target.
    program_keypair_path:
        Local program identity file, required for first-time deploys.
    min_balance_sol:
        Balance below which a warning is emitted.
    """

    def __init__(
        self,
        chain: ChainReader,
        program_keypair_path: Path,
        *,
        min_balance_sol: float = 2.0,
    ) -> None:
        self._chain = chain
        self._program_keypair_path = program_keypair_path
        self._min_balance_lamports = int(min_balance_sol * LAMPORTS_PER_SOL)

    def check(
        self,
        target: DeploymentTarget,
        deployer: Identity,
        program: Identity,
        workflow: WorkflowKind,
    ) -> PreconditionReport:
        """Run all checks for *workflow* and return the report.

        Raises
        ------
        ProgramKeypairMissingError
            Deploy workflow without a local program keypair.
        ProgramNotFoundError
            Upgrade workflow whose program account is absent.
        NotExecutableError
            Upgrade workflow whose program account is not executable.
        """
        warnings: list[str] = []

        # Deploy: the program keypair must exist before we spend anything.
        if workflow == WorkflowKind.DEPLOY and not self._program_keypair_path.is_file():
            raise ProgramKeypairMissingError(
                f"Program keypair not found at: {self._program_keypair_path}"
            )

        balance = self._chain.get_balance(deployer.public_address)
        logger.info(
            "Deployer balance: %.4f SOL (%s)",
            lamports_to_sol(balance),
            target.commitment_level.value,
        )
        if balance < self._min_balance_lamports:
            message = (
                f"Low balance: {lamports_to_sol(balance):.4f} SOL, at least "
                f"{lamports_to_sol(self._min_balance_lamports):g} SOL recommended"
            )
            logger.warning(message)
            warnings.append(message)

        program_state: OnChainProgramState | None = None
        if workflow == WorkflowKind.UPGRADE:
            program_state = self._check_upgradeable(program.public_address, warnings)

        return PreconditionReport(
            workflow=workflow,
            deployer_address=deployer.public_address,
            balance_lamports=balance,
            min_balance_lamports=self._min_balance_lamports,
            program_state=program_state,
            warnings=warnings,
        )

    def _check_upgradeable(
        self, address: str, warnings: list[str]
    ) -> OnChainProgramState:
        state = self._chain.get_account_info(address)
        if not state.exists:
            raise ProgramNotFoundError(
                f"Program not found at: {address}. Deploy it first."
            )
        if not state.executable:
            raise NotExecutableError(
                f"Account {address} exists but is not executable"
            )

        logger.info("Program found: %s (owner %s)", address, state.owner)
        if state.owner != UPGRADEABLE_LOADER_ID:
            message = (
                f"Program owner is {state.owner}, not {UPGRADEABLE_LOADER_ID}; "
                "program might be immutable"
            )
            logger.warning(message)
            warnings.append(message)
        return state
