"""Deployment target models — where a run publishes to."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Commitment(str, Enum):
    """Durability level requested when reading network state."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


class DeploymentTarget(BaseModel):
    """Network endpoint plus commitment level.  Immutable for the run."""

    model_config = ConfigDict(frozen=True)

    network_endpoint: str
    commitment_level: Commitment = Commitment.CONFIRMED
