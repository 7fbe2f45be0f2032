"""JSON-RPC account queries against the target network.

Bridge boundary
---------------
``ChainReader`` is the Protocol the precondition, publish and status
stages depend on.  ``ChainClient`` implements it with JSON-RPC 2.0 over
``requests``.  Only read methods are used: mutating submissions go
through the chain CLI, never through this client.
"""

from __future__ import annotations

import base64
import binascii
import itertools
import logging
from typing import Any, Protocol, runtime_checkable

import requests

from deployforge.core.errors import ChainQueryError
from deployforge.models.chain import OnChainProgramState
from deployforge.models.targets import Commitment, DeploymentTarget

logger = logging.getLogger(__name__)


@runtime_checkable
class ChainReader(Protocol):
    """Protocol for read-only account queries."""

    def get_balance(self, address: str) -> int:
        """Return the balance of *address* in lamports."""
        ...

    def get_account_info(self, address: str) -> OnChainProgramState:
        """Return the account state of *address* (``exists=False`` if absent)."""
        ...

    def get_slot(self) -> int:
        """Return the current slot."""
        ...


class ChainClient:
    """``ChainReader`` over HTTP JSON-RPC.

    Parameters
    ----------
    endpoint:
        JSON-RPC URL of the network.
    commitment:
        Commitment level sent with every query.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional ``requests.Session`` (or compatible object) to reuse.
    """

    def __init__(
        self,
        endpoint: str,
        commitment: Commitment = Commitment.CONFIRMED,
        *,
        timeout: float = 30.0,
        session: Any | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self._timeout = timeout
        self._session = session or requests.Session()
        self._ids = itertools.count(1)

    @classmethod
    def for_target(cls, target: DeploymentTarget, **kwargs: Any) -> ChainClient:
        return cls(target.network_endpoint, target.commitment_level, **kwargs)

    # ------------------------------------------------------------------
    # ChainReader
    # ------------------------------------------------------------------

    def get_balance(self, address: str) -> int:
        result = self._call("getBalance", [address, self._config()])
        value = self._value(result, "getBalance")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ChainQueryError(f"getBalance returned {value!r}") from exc

    def get_account_info(self, address: str) -> OnChainProgramState:
        result = self._call(
            "getAccountInfo", [address, self._config(encoding="base64")]
        )
        value = self._value(result, "getAccountInfo")
        if value is None:
            return OnChainProgramState(address=address, exists=False)

        try:
            return OnChainProgramState(
                address=address,
                exists=True,
                executable=bool(value.get("executable", False)),
                owner=str(value.get("owner", "")),
                data_length=_data_length(value.get("data")),
                lamports=int(value.get("lamports", 0)),
            )
        except (AttributeError, TypeError, ValueError, binascii.Error) as exc:
            raise ChainQueryError(
                f"getAccountInfo returned an unexpected account shape: {exc}"
            ) from exc

    def get_slot(self) -> int:
        result = self._call("getSlot", [self._config()])
        try:
            return int(result)
        except (TypeError, ValueError) as exc:
            raise ChainQueryError(f"getSlot returned {result!r}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _config(self, **extra: str) -> dict[str, str]:
        return {"commitment": self.commitment.value, **extra}

    def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("rpc %s %s", method, params[0] if params else "")
        try:
            response = self._session.post(
                self.endpoint, json=payload, timeout=self._timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as exc:
            raise ChainQueryError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise ChainQueryError(f"{method} returned a non-JSON body") from exc

        if not isinstance(body, dict):
            raise ChainQueryError(f"{method} returned {type(body).__name__}, expected object")
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ChainQueryError(f"{method} error: {message}")
        if "result" not in body:
            raise ChainQueryError(f"{method} response has no result")
        return body["result"]

    @staticmethod
    def _value(result: Any, method: str) -> Any:
        """Unwrap the ``{"context": ..., "value": ...}`` envelope."""
        if not isinstance(result, dict) or "value" not in result:
            raise ChainQueryError(f"{method} returned {result!r}, expected a value envelope")
        return result["value"]


def _data_length(data: Any) -> int:
    """Length of account data from a ``[payload, encoding]`` pair."""
    if not data:
        return 0
    if isinstance(data, list):
        payload = data[0] if data else ""
        return len(base64.b64decode(payload))
    return len(base64.b64decode(data))
