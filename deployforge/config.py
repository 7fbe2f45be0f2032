"""Deployment configuration — env-driven, constructed once per invocation.

Centralized settings using pydantic-settings.  Reads from a .env file and
DEPLOYFORGE_* environment variables.  The variable names used by the older
shell/node scripts (``MAINNET_RPC``, ``DEPLOYER_KEYPAIR``, ``REPO_URL``) are
accepted as aliases so existing operator setups keep working.

The settings object is built once by the CLI and handed to every component
explicitly; nothing below reads the environment on its own.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from deployforge.models.artifacts import BuildMode
from deployforge.models.targets import Commitment

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_VERIFY_API_URL = "https://verify.osec.io"

# Pinned identities of the program this repository ships.
EXPECTED_DEPLOYER = "CrCoo582AQi2nciHM73yisYmV1Gk7SMSe5CcMM14jSW8"
PROGRAM_ID = "GZzqLG5WuHm9fipCh5PsEyo841F7Kbz9YvNRYynQQY2Z"


def _default_deployer_keypair() -> Path:
    return Path.home() / ".config" / "solana" / "id.json"


class DeploySettings(BaseSettings):
    """Deployment settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export MAINNET_RPC=https://my-rpc.example/?api-key=...
        export DEPLOYER_KEYPAIR=/secure/deployer.json
        export DEPLOYFORGE_MIN_BALANCE_SOL=5

    Or via .env file::

        DEPLOYFORGE_DEPLOY_BUILD_MODE=container
        DEPLOYFORGE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DEPLOYFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = "INFO"

    # Network
    rpc_url: str = Field(
        default=DEFAULT_RPC_URL,
        validation_alias=AliasChoices("DEPLOYFORGE_RPC_URL", "MAINNET_RPC"),
    )
    commitment: Commitment = Commitment.CONFIRMED

    # Identities
    deployer_keypair_path: Path = Field(
        default_factory=_default_deployer_keypair,
        validation_alias=AliasChoices(
            "DEPLOYFORGE_DEPLOYER_KEYPAIR", "DEPLOYER_KEYPAIR"
        ),
    )
    expected_deployer: str = EXPECTED_DEPLOYER
    program_id: str = PROGRAM_ID
    program_keypair: Path | None = None  # defaults to target/deploy/<lib>-keypair.json

    # Project layout
    project_dir: Path = Path(".")
    program_name: str = "test_program"

    # Build
    deploy_build_mode: BuildMode = BuildMode.REPRODUCIBLE
    upgrade_build_mode: BuildMode = BuildMode.STANDARD
    build_timeout_seconds: float | None = 1800.0
    dockerfile: Path = Path("Dockerfile")

    # Publish policy, passed straight through to the chain CLI
    compute_unit_price: int | None = 50_000
    max_sign_attempts: int | None = 100
    use_rpc: bool = True
    publish_timeout_seconds: float | None = 900.0

    # Preconditions
    min_balance_sol: float = 2.0

    # Source verification
    repo_url: str = Field(
        default="https://github.com/uniwexLab/test_program_verify",
        validation_alias=AliasChoices("DEPLOYFORGE_REPO_URL", "REPO_URL"),
    )
    verify_api_url: str = DEFAULT_VERIFY_API_URL
    http_timeout_seconds: float = 30.0

    # External tool binaries
    anchor_bin: str = "anchor"
    solana_bin: str = "solana"
    docker_bin: str = "docker"
    git_bin: str = "git"

    @property
    def program_keypair_path(self) -> Path:
        """Location of the program identity file."""
        if self.program_keypair is not None:
            return self.program_keypair
        return self.project_dir / "target" / "deploy" / f"{self.program_name}-keypair.json"

    @property
    def container_image(self) -> str:
        return f"{self.program_name}-verifiable-build"

    @property
    def container_name(self) -> str:
        return f"{self.program_name}-container"
