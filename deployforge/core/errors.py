"""Error taxonomy for the deployment workflow.

Every error is fatal to the current invocation.  The orchestrator catches
``DeployError`` at each stage boundary, records ``Failed(stage, error)`` and
halts.  Nothing here is retried.
"""

from __future__ import annotations

from collections.abc import Sequence

from deployforge.models.artifacts import BuildMode


class DeployError(RuntimeError):
    """Base for every workflow failure."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(DeployError):
    """Raised when deployer/program identity or endpoint cannot be resolved."""


class MissingFileError(ConfigError):
    """A required identity file does not exist."""


class MalformedIdentityError(ConfigError):
    """An identity file exists but cannot be parsed as a keypair."""


class IdentityMismatchError(ConfigError):
    """The deployer keypair does not match the pinned expected address."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Deployer address mismatch: expected {expected}, got {actual}. "
            "Check the DEPLOYER_KEYPAIR path."
        )


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


class PreconditionError(DeployError):
    """Raised when a risky step is not allowed to run."""


class ProgramNotFoundError(PreconditionError):
    """Upgrade target has no account on the network."""


class NotExecutableError(PreconditionError):
    """Upgrade target exists but is not an executable program."""


class ProgramKeypairMissingError(PreconditionError):
    """First deploy requires the program keypair file."""


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


class BuildError(DeployError):
    """Raised when the program binary cannot be produced."""


class BuildToolFailedError(BuildError):
    """The build tool exited non-zero."""

    def __init__(self, command: Sequence[str], mode: BuildMode, exit_code: int) -> None:
        self.command = list(command)
        self.mode = mode
        self.exit_code = exit_code
        super().__init__(
            f"{mode.value} build failed (exit {exit_code}): {' '.join(self.command)}"
        )


class ArtifactMissingError(BuildError):
    """The build tool succeeded but the expected binary is absent or empty."""


class BuildTimeoutError(BuildError):
    """The build tool did not finish within the configured timeout."""


# ---------------------------------------------------------------------------
# Publish
# ---------------------------------------------------------------------------


class PublishError(DeployError):
    """Raised when the binary cannot be confirmed live on the network."""


class PublishArtifactMissingError(PublishError):
    """The artifact vanished or is empty when publish was attempted."""


class PublishToolFailedError(PublishError):
    """The chain CLI exited non-zero."""

    def __init__(self, command: Sequence[str], exit_code: int) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        super().__init__(f"publish command failed (exit {exit_code})")


class PublishVerificationFailedError(PublishError):
    """The chain CLI reported success but the read-back disagrees."""


class PublishTimeoutError(PublishError):
    """The chain CLI did not finish within the configured timeout."""


# ---------------------------------------------------------------------------
# Source verification
# ---------------------------------------------------------------------------


class VerificationError(DeployError):
    """Raised for attestation-service failures."""


class VerificationRequestFailedError(VerificationError):
    """Non-2xx, unreachable, or unparsable response from the service."""


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class ChainQueryError(DeployError):
    """A JSON-RPC account query failed at the transport or protocol level."""
