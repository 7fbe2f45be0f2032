"""Source verification request / result models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# Sent when no source-control snapshot is available.
PLACEHOLDER_COMMIT = "0" * 40


class VerificationStatus(str, Enum):
    """Status of a verification job.  Transitions are owned by the service."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class VerificationRequest(BaseModel):
    """Correlates a source snapshot with a published program."""

    model_config = ConfigDict(frozen=True)

    repository_url: str
    program_address: str
    commit_hash: str = PLACEHOLDER_COMMIT
    library_name: str

    @property
    def uses_placeholder_commit(self) -> bool:
        return self.commit_hash == PLACEHOLDER_COMMIT

    def to_payload(self) -> dict[str, str]:
        """Body of the ``POST /verify`` call."""
        return {
            "repository": self.repository_url,
            "program_id": self.program_address,
            "commit_hash": self.commit_hash,
            "lib_name": self.library_name,
        }


class VerificationResult(BaseModel):
    """The service's current view of a verification job."""

    model_config = ConfigDict(frozen=True)

    request_id: str = ""
    program_address: str = ""
    status: VerificationStatus = VerificationStatus.PENDING
    message: str = ""
    raw: dict[str, Any] = {}
