"""Read-only projections of on-chain state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

LAMPORTS_PER_SOL = 1_000_000_000

# Owner of every program that can be upgraded after deployment.
UPGRADEABLE_LOADER_ID = "BPFLoaderUpgradeab1e11111111111111111111111"


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


class OnChainProgramState(BaseModel):
    """Account state for a program address as reported by the network.

    Re-fetched after every mutating operation; never mutated locally.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    exists: bool = False
    executable: bool = False
    owner: str = ""
    data_length: int = 0
    lamports: int = 0

    @property
    def balance_sol(self) -> float:
        return lamports_to_sol(self.lamports)

    @property
    def is_upgradeable(self) -> bool:
        return self.exists and self.owner == UPGRADEABLE_LOADER_ID

    @property
    def is_live(self) -> bool:
        """True when the program exists and can be invoked."""
        return self.exists and self.executable
