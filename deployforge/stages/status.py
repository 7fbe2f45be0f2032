"""Read-only status check of deployer funds and program state."""

from __future__ import annotations

import logging

from deployforge.bridge.rpc import ChainReader
from deployforge.models.identity import Identity
from deployforge.models.reports import StatusReport
from deployforge.models.targets import DeploymentTarget

logger = logging.getLogger(__name__)


class StatusChecker:
    """Collects a ``StatusReport``; never mutates anything."""

    def __init__(self, chain: ChainReader) -> None:
        self._chain = chain

    def check(
        self, target: DeploymentTarget, deployer: Identity, program: Identity
    ) -> StatusReport:
        balance = self._chain.get_balance(deployer.public_address)
        state = self._chain.get_account_info(program.public_address)
        slot = self._chain.get_slot()
        logger.info(
            "Status: program %s exists=%s executable=%s slot=%d",
            program.public_address,
            state.exists,
            state.executable,
            slot,
        )
        return StatusReport(
            network_endpoint=target.network_endpoint,
            deployer_address=deployer.public_address,
            deployer_lamports=balance,
            program_state=state,
            slot=slot,
        )
