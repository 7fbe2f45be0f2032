"""Build Invoker — runs the external build pipeline and locates the binary.

The build tool can exit 0 yet leave no binary behind under some toolchain
misconfigurations, so the artifact is checked independently of the exit
code.  The SHA-256 digest is reported for manual cross-check against a
third-party rebuild; nothing here enforces it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from deployforge.bridge.process import ProcessRunner, ProcessTimeoutError
from deployforge.config import DeploySettings
from deployforge.core.errors import (
    ArtifactMissingError,
    BuildTimeoutError,
    BuildToolFailedError,
)
from deployforge.core.hasher import sha256_file
from deployforge.models.artifacts import BuildArtifact, BuildMode

logger = logging.getLogger(__name__)


class BuildInvoker:
    """Produces a ``BuildArtifact`` in one of three modes.

    Parameters
    ----------
    settings:
        Supplies project layout, tool binaries, endpoint and timeout.
    runner:
        Process backend; inherited stdio so the operator sees live output.
    """

    def __init__(self, settings: DeploySettings, runner: ProcessRunner) -> None:
        self._settings = settings
        self._runner = runner

    @property
    def project_dir(self) -> Path:
        return self._settings.project_dir

    def artifact_path(self, mode: BuildMode) -> Path:
        """Where *mode* leaves the program binary."""
        subdir = "verifiable" if mode == BuildMode.REPRODUCIBLE else "deploy"
        return self.project_dir / "target" / subdir / f"{self._settings.program_name}.so"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, mode: BuildMode) -> BuildArtifact:
        """Run the build for *mode* and return the located artifact.

        Raises
        ------
        BuildToolFailedError
            Any build command exits non-zero.
        BuildTimeoutError
            A build command outlives ``build_timeout_seconds``.
        ArtifactMissingError
            The expected binary is absent or empty after a clean exit.
        """
        logger.info("Building %s (%s mode)", self._settings.program_name, mode.value)
        if mode == BuildMode.CONTAINER:
            self._build_in_container()
        else:
            command = [self._settings.anchor_bin, "build"]
            if mode == BuildMode.REPRODUCIBLE:
                command.append("--verifiable")
            self._run(command, mode)

        return self.locate(mode)

    def locate(self, mode: BuildMode) -> BuildArtifact:
        """Find and fingerprint the binary that *mode* produces."""
        path = self.artifact_path(mode)
        if not path.is_file():
            raise ArtifactMissingError(f"Program binary not found at: {path}")

        size = path.stat().st_size
        if size == 0:
            raise ArtifactMissingError(f"Program binary is empty: {path}")

        digest = sha256_file(path)
        logger.info("Program size: %.2f KB", size / 1024)
        logger.info("SHA256 hash: %s", digest)
        return BuildArtifact(file_path=path, size_bytes=size, digest=digest, mode=mode)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_in_container(self) -> None:
        """docker build -> create -> cp -> rm, as a reproducible build."""
        s = self._settings
        mode = BuildMode.CONTAINER
        destination = self.artifact_path(mode)
        destination.parent.mkdir(parents=True, exist_ok=True)

        self._run(
            [s.docker_bin, "build", "-t", s.container_image, "-f", str(s.dockerfile), "."],
            mode,
        )
        self._run([s.docker_bin, "create", "--name", s.container_name, s.container_image], mode)
        try:
            self._run(
                [
                    s.docker_bin,
                    "cp",
                    f"{s.container_name}:/project/target/deploy/{s.program_name}.so",
                    str(destination),
                ],
                mode,
            )
        finally:
            cleanup = self._runner.run(
                [s.docker_bin, "rm", s.container_name],
                cwd=self.project_dir,
                capture_output=True,
            )
            if not cleanup.ok:
                logger.warning("Could not remove container %s", s.container_name)

    def _run(self, command: Sequence[str], mode: BuildMode) -> None:
        try:
            result = self._runner.run(
                command,
                cwd=self.project_dir,
                env_overlay={"ANCHOR_PROVIDER_URL": self._settings.rpc_url},
                timeout=self._settings.build_timeout_seconds,
            )
        except ProcessTimeoutError as exc:
            raise BuildTimeoutError(str(exc)) from exc

        if not result.ok:
            logger.error("Build command failed: %s", " ".join(command))
            raise BuildToolFailedError(command, mode, result.exit_code)
