"""HTTP client for the remote source-verification service.

Three endpoints are used::

    POST {base}/verify               submit a verification job
    GET  {base}/status/{program_id}  current verification view
    GET  {base}/logs/{program_id}    build logs of the last job

Any non-2xx status, transport failure or non-JSON body surfaces as
``VerificationRequestFailedError``.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from deployforge.core.errors import VerificationRequestFailedError

logger = logging.getLogger(__name__)


class VerifyApiClient:
    """Thin JSON wrapper over the verification service.

    Parameters
    ----------
    base_url:
        Service root, e.g. ``https://verify.osec.io``.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional ``requests.Session`` (or compatible object).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        session: Any | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def submit(self, payload: dict[str, str]) -> dict[str, Any]:
        return self._request("POST", "/verify", json=payload)

    def status(self, program_id: str) -> dict[str, Any]:
        return self._request("GET", f"/status/{program_id}")

    def logs(self, program_id: str) -> dict[str, Any]:
        return self._request("GET", f"/logs/{program_id}")

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method, url, timeout=self._timeout, **kwargs
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as exc:
            raise VerificationRequestFailedError(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise VerificationRequestFailedError(
                f"{method} {url} returned a non-JSON body"
            ) from exc

        if not isinstance(body, dict):
            raise VerificationRequestFailedError(
                f"{method} {url} returned {type(body).__name__}, expected object"
            )
        return body
