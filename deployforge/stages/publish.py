"""Publish Invoker — submits the binary and confirms it is live.

Two-phase contract:
    1. The chain CLI must exit 0.
    2. An independent read-back must show the account present and
       executable.

The exit code alone is not trusted: a submission can partially land and
leave state that differs from what was expected.
"""

from __future__ import annotations

import logging
from enum import Enum

from deployforge.bridge.process import ProcessRunner, ProcessTimeoutError
from deployforge.bridge.rpc import ChainReader
from deployforge.config import DeploySettings
from deployforge.core.errors import (
    PublishArtifactMissingError,
    PublishTimeoutError,
    PublishToolFailedError,
    PublishVerificationFailedError,
)
from deployforge.models.artifacts import BuildArtifact
from deployforge.models.identity import Identity
from deployforge.models.targets import DeploymentTarget

logger = logging.getLogger(__name__)


class PublishMode(str, Enum):
    INITIAL_DEPLOY = "initial_deploy"
    UPGRADE = "upgrade"


class PublishInvoker:
    """Runs ``solana program deploy`` and verifies the result on-chain.

    Parameters
    ----------
    settings:
        Supplies the chain CLI binary, fee policy and timeout.
    runner:
        Process backend for the chain CLI.
    chain:
        Read-only client used for the post-publish read-back.
    """

    def __init__(
        self,
        settings: DeploySettings,
        runner: ProcessRunner,
        chain: ChainReader,
    ) -> None:
        self._settings = settings
        self._runner = runner
        self._chain = chain

    def build_command(
        self,
        artifact: BuildArtifact,
        program: Identity,
        deployer: Identity,
        target: DeploymentTarget,
    ) -> list[str]:
        """Assemble the chain CLI invocation.

        The program is referenced by its keypair file when one was loaded,
        otherwise by address (valid for upgrades of an existing program).
        """
        s = self._settings
        if program.has_secret and program.source_path:
            program_ref = str(program.source_path)
        else:
            program_ref = program.public_address
        deployer_ref = str(deployer.source_path) if deployer.source_path else str(s.deployer_keypair_path)

        command = [
            s.solana_bin,
            "program",
            "deploy",
            str(artifact.file_path),
            "--program-id",
            program_ref,
            "--keypair",
            deployer_ref,
            "--url",
            target.network_endpoint,
            "--commitment",
            target.commitment_level.value,
        ]
        if s.compute_unit_price is not None:
            command += ["--with-compute-unit-price", str(s.compute_unit_price)]
        if s.max_sign_attempts is not None:
            command += ["--max-sign-attempts", str(s.max_sign_attempts)]
        if s.use_rpc:
            command.append("--use-rpc")
        return command

    def publish(
        self,
        artifact: BuildArtifact,
        program: Identity,
        deployer: Identity,
        target: DeploymentTarget,
        mode: PublishMode,
    ) -> str:
        """Publish *artifact* and return the confirmed program address.

        Raises
        ------
        PublishArtifactMissingError
            The artifact is absent or empty at submission time.
        PublishToolFailedError
            The chain CLI exited non-zero.
        PublishTimeoutError
            The chain CLI outlived ``publish_timeout_seconds``.
        PublishVerificationFailedError
            The CLI succeeded but the program is not live on-chain.
        """
        path = artifact.file_path
        if not path.is_file() or path.stat().st_size == 0:
            raise PublishArtifactMissingError(f"Artifact missing or empty at publish time: {path}")

        command = self.build_command(artifact, program, deployer, target)
        logger.info(
            "%s %s to %s",
            "Upgrading" if mode == PublishMode.UPGRADE else "Deploying",
            program.public_address,
            target.network_endpoint.split("?", 1)[0],
        )

        try:
            result = self._runner.run(
                command,
                cwd=self._settings.project_dir,
                env_overlay={
                    "SOLANA_CLUSTER_URL": target.network_endpoint,
                    "ANCHOR_PROVIDER_URL": target.network_endpoint,
                },
                timeout=self._settings.publish_timeout_seconds,
            )
        except ProcessTimeoutError as exc:
            raise PublishTimeoutError(str(exc)) from exc

        if not result.ok:
            raise PublishToolFailedError(command, result.exit_code)

        return self.confirm(program.public_address)

    def confirm(self, address: str) -> str:
        """Read back *address* and require it to be live."""
        state = self._chain.get_account_info(address)
        if not state.is_live:
            logger.error(
                "Read-back of %s: exists=%s executable=%s",
                address,
                state.exists,
                state.executable,
            )
            raise PublishVerificationFailedError(
                f"Publish reported success but {address} is not live "
                f"(exists={state.exists}, executable={state.executable})"
            )
        logger.info(
            "Program is executable at %s (owner %s, %d data bytes)",
            address,
            state.owner,
            state.data_length,
        )
        return address
