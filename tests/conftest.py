"""Shared test fixtures for deployforge.

External collaborators (processes, chain RPC, HTTP) are replaced with
in-memory fakes so no test touches the network, anchor, solana or docker.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import base58
import nacl.signing
import pytest
import requests

from deployforge.bridge.process import ProcessResult
from deployforge.config import DeploySettings
from deployforge.models.artifacts import BuildMode
from deployforge.models.chain import UPGRADEABLE_LOADER_ID, OnChainProgramState

RPC_URL = "http://rpc.test"
VERIFY_URL = "http://verify.test"


# ---------------------------------------------------------------------------
# Keypair helpers
# ---------------------------------------------------------------------------


def write_keypair(path: Path, key: nacl.signing.SigningKey) -> Path:
    """Write *key* in the 64-integer JSON keypair format."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(list(bytes(key) + bytes(key.verify_key))))
    return path


def address_of(key: nacl.signing.SigningKey) -> str:
    return base58.b58encode(bytes(key.verify_key)).decode("ascii")


# ---------------------------------------------------------------------------
# Fake process runner
# ---------------------------------------------------------------------------


@dataclass
class FakeCall:
    command: list[str]
    cwd: Path | None
    env_overlay: dict[str, str]
    capture_output: bool
    timeout: float | None


@dataclass
class _Rule:
    prefix: tuple[str, ...]
    exit_code: int = 0
    stdout: str = ""
    effect: Callable[[list[str]], None] | None = None
    raises: BaseException | None = None


class FakeRunner:
    """Records every command; answers from prefix-matched rules (exit 0 by default)."""

    def __init__(self) -> None:
        self.calls: list[FakeCall] = []
        self._rules: list[_Rule] = []

    def on(
        self,
        *prefix: str,
        exit_code: int = 0,
        stdout: str = "",
        effect: Callable[[list[str]], None] | None = None,
        raises: BaseException | None = None,
    ) -> FakeRunner:
        self._rules.insert(0, _Rule(prefix, exit_code, stdout, effect, raises))
        return self

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overlay: dict[str, str] | None = None,
        capture_output: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        argv = [str(c) for c in command]
        self.calls.append(FakeCall(argv, cwd, dict(env_overlay or {}), capture_output, timeout))
        for rule in self._rules:
            if tuple(argv[: len(rule.prefix)]) == rule.prefix:
                if rule.raises is not None:
                    raise rule.raises
                if rule.effect is not None:
                    rule.effect(argv)
                return ProcessResult(command=argv, exit_code=rule.exit_code, stdout=rule.stdout)
        return ProcessResult(command=argv, exit_code=0)

    @property
    def commands(self) -> list[list[str]]:
        return [c.command for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.commands)


# ---------------------------------------------------------------------------
# Fake chain reader
# ---------------------------------------------------------------------------


class FakeChain:
    """In-memory ChainReader; unknown accounts read as absent."""

    def __init__(self, balances: dict[str, int] | None = None, slot: int = 250_000_000) -> None:
        self.balances: dict[str, int] = dict(balances or {})
        self.accounts: dict[str, OnChainProgramState] = {}
        self.slot = slot
        self.calls: list[tuple[str, str]] = []

    def set_account(self, address: str, **fields: Any) -> OnChainProgramState:
        defaults: dict[str, Any] = {
            "exists": True,
            "executable": True,
            "owner": UPGRADEABLE_LOADER_ID,
            "data_length": 36,
            "lamports": 1_141_440,
        }
        defaults.update(fields)
        state = OnChainProgramState(address=address, **defaults)
        self.accounts[address] = state
        return state

    def get_balance(self, address: str) -> int:
        self.calls.append(("get_balance", address))
        return self.balances.get(address, 0)

    def get_account_info(self, address: str) -> OnChainProgramState:
        self.calls.append(("get_account_info", address))
        return self.accounts.get(address, OnChainProgramState(address=address))

    def get_slot(self) -> int:
        self.calls.append(("get_slot", ""))
        return self.slot


# ---------------------------------------------------------------------------
# Fake HTTP session
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, body: Any = None, status_code: int = 200, *, invalid_json: bool = False) -> None:
        self._body = body
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._body


class FakeSession:
    """Answers each request with the next queued response (or the last one forever)."""

    def __init__(self, *responses: FakeResponse) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def queue(self, response: FakeResponse) -> None:
        self._responses.append(response)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise requests.ConnectionError("no response queued")
        if len(self._responses) == 1:
            return self._responses[0]
        return self._responses.pop(0)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's shell variables and .env out of every test."""
    for name in list(os.environ):
        if name.startswith("DEPLOYFORGE_") or name in ("MAINNET_RPC", "DEPLOYER_KEYPAIR", "REPO_URL"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def deployer_key() -> nacl.signing.SigningKey:
    return nacl.signing.SigningKey.generate()


@pytest.fixture
def program_key() -> nacl.signing.SigningKey:
    return nacl.signing.SigningKey.generate()


@pytest.fixture
def deployer_address(deployer_key: nacl.signing.SigningKey) -> str:
    return address_of(deployer_key)


@pytest.fixture
def program_address(program_key: nacl.signing.SigningKey) -> str:
    return address_of(program_key)


@pytest.fixture
def deployer_keypair_file(tmp_path: Path, deployer_key: nacl.signing.SigningKey) -> Path:
    return write_keypair(tmp_path / "config" / "solana" / "id.json", deployer_key)


@pytest.fixture
def program_keypair_file(project_dir: Path, program_key: nacl.signing.SigningKey) -> Path:
    return write_keypair(
        project_dir / "target" / "deploy" / "test_program-keypair.json", program_key
    )


@pytest.fixture
def settings(
    project_dir: Path,
    deployer_keypair_file: Path,
    deployer_address: str,
    program_address: str,
) -> DeploySettings:
    """Settings pinned to the generated deployer and program keys."""
    return DeploySettings(
        rpc_url=RPC_URL,
        deployer_keypair_path=deployer_keypair_file,
        expected_deployer=deployer_address,
        program_id=program_address,
        project_dir=project_dir,
        verify_api_url=VERIFY_URL,
        build_timeout_seconds=60.0,
        publish_timeout_seconds=60.0,
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def write_artifact(project_dir: Path) -> Callable[..., Path]:
    """Factory: drop a fake program binary where *mode* expects it."""

    def _factory(mode: BuildMode = BuildMode.STANDARD, content: bytes = b"\x7fELF-program") -> Path:
        subdir = "verifiable" if mode == BuildMode.REPRODUCIBLE else "deploy"
        path = project_dir / "target" / subdir / "test_program.so"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _factory


@pytest.fixture
def keypair_factory(tmp_path: Path) -> Callable[..., tuple[Path, str]]:
    """Factory: write a fresh keypair file, return ``(path, address)``."""

    def _factory(
        name: str = "extra.json", key: nacl.signing.SigningKey | None = None
    ) -> tuple[Path, str]:
        key = key or nacl.signing.SigningKey.generate()
        return write_keypair(tmp_path / "keys" / name, key), address_of(key)

    return _factory


@pytest.fixture
def respond() -> type[FakeResponse]:
    """Canned HTTP response constructor: ``respond(body, status_code=200)``."""
    return FakeResponse


@pytest.fixture
def session_factory() -> type[FakeSession]:
    """Fake ``requests.Session`` constructor taking queued responses."""
    return FakeSession
