"""Verification Requester — asks the attestation service to rebuild from source.

Requests are advisory, not mutating: when no commit can be resolved the
all-zero placeholder is sent instead of failing.  Status polling is a
side-effect-free read and safe to repeat.
"""

from __future__ import annotations

import logging
from typing import Any

from deployforge.bridge.process import ProcessRunner, ProcessTimeoutError
from deployforge.bridge.verify_api import VerifyApiClient
from deployforge.config import DeploySettings
from deployforge.models.verification import (
    PLACEHOLDER_COMMIT,
    VerificationRequest,
    VerificationResult,
    VerificationStatus,
)

logger = logging.getLogger(__name__)

_SUCCESS_STATUSES = frozenset({"success", "succeeded", "completed", "verified"})
_FAILURE_STATUSES = frozenset({"failure", "failed", "error", "rejected"})


def map_status(body: dict[str, Any]) -> VerificationStatus:
    """Map a service response body onto the local status enum."""
    if body.get("is_verified") is True:
        return VerificationStatus.SUCCESS
    status = str(body.get("status", "")).lower()
    if status in _FAILURE_STATUSES:
        return VerificationStatus.FAILURE
    if status in _SUCCESS_STATUSES and "is_verified" not in body:
        return VerificationStatus.SUCCESS
    return VerificationStatus.PENDING


class VerificationRequester:
    """Submits and polls source verification jobs.

    Parameters
    ----------
    settings:
        Supplies repository URL, library name and project directory.
    client:
        HTTP client for the verification service.
    runner:
        Process backend used to read the local commit.
    """

    def __init__(
        self,
        settings: DeploySettings,
        client: VerifyApiClient,
        runner: ProcessRunner,
    ) -> None:
        self._settings = settings
        self._client = client
        self._runner = runner

    def resolve_commit_hash(self) -> str:
        """HEAD of the local checkout, or the all-zero placeholder."""
        try:
            result = self._runner.run(
                [self._settings.git_bin, "rev-parse", "HEAD"],
                cwd=self._settings.project_dir,
                capture_output=True,
                timeout=30,
            )
        except ProcessTimeoutError:
            result = None

        commit = result.stdout.strip() if result is not None and result.ok else ""
        if not commit:
            logger.warning("Not a git repository, using placeholder commit")
            return PLACEHOLDER_COMMIT
        return commit

    def prepare_request(
        self, program_address: str, commit_hash: str | None = None
    ) -> VerificationRequest:
        return VerificationRequest(
            repository_url=self._settings.repo_url,
            program_address=program_address,
            commit_hash=commit_hash or self.resolve_commit_hash(),
            library_name=self._settings.program_name,
        )

    def request_verification(self, request: VerificationRequest) -> VerificationResult:
        """Submit *request*.

        Raises ``VerificationRequestFailedError`` on a non-2xx or
        unparsable response.
        """
        logger.info(
            "Submitting verification for %s at %s (%s)",
            request.program_address,
            request.commit_hash,
            request.repository_url,
        )
        body = self._client.submit(request.to_payload())
        return VerificationResult(
            request_id=str(body.get("request_id", "")),
            program_address=request.program_address,
            status=map_status(body),
            message=str(body.get("message", "")),
            raw=body,
        )

    def poll_status(self, program_address: str) -> VerificationResult:
        body = self._client.status(program_address)
        return VerificationResult(
            request_id=str(body.get("request_id", "")),
            program_address=program_address,
            status=map_status(body),
            message=str(body.get("message", "")),
            raw=body,
        )

    def fetch_logs(self, program_address: str) -> dict[str, Any]:
        return self._client.logs(program_address)
