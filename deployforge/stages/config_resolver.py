"""Config Resolver — identities and target, validated before anything runs.

Resolution order:
    1. Deployer keypair from the configured path (env-overridable).
    2. Pinned-address check — mismatch is fatal and short-circuits the run
       before any network or process call.
    3. Program identity: keypair file if present, else the pinned
       program id as a public-only identity.
    4. Network endpoint and commitment from settings.
"""

from __future__ import annotations

import logging

from deployforge.bridge.keypair import load_keypair
from deployforge.config import DeploySettings
from deployforge.core.errors import IdentityMismatchError
from deployforge.models.identity import Identity
from deployforge.models.targets import DeploymentTarget

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Loads deployer identity, program identity and deployment target.

    Parameters
    ----------
    settings:
        The run's settings.  Read-only.
    """

    def __init__(self, settings: DeploySettings) -> None:
        self._settings = settings

    def resolve(
        self, *, enforce_pinned: bool = True
    ) -> tuple[DeploymentTarget, Identity, Identity]:
        """Return ``(target, deployer, program)``.

        Raises
        ------
        MissingFileError
            Deployer keypair absent.
        MalformedIdentityError
            Deployer or program keypair unparsable.
        IdentityMismatchError
            Deployer address differs from the pinned expected address
            (only when *enforce_pinned*).
        """
        deployer = self.resolve_deployer(enforce_pinned=enforce_pinned)
        program = self.resolve_program()
        target = self.resolve_target()
        logger.info(
            "Resolved deployer=%s program=%s endpoint=%s",
            deployer.public_address,
            program.public_address,
            _redact_endpoint(target.network_endpoint),
        )
        return target, deployer, program

    def resolve_deployer(self, *, enforce_pinned: bool = True) -> Identity:
        deployer = load_keypair(self._settings.deployer_keypair_path)
        if enforce_pinned and deployer.public_address != self._settings.expected_deployer:
            logger.error(
                "Deployer address mismatch: expected %s, got %s",
                self._settings.expected_deployer,
                deployer.public_address,
            )
            raise IdentityMismatchError(
                self._settings.expected_deployer, deployer.public_address
            )
        return deployer

    def resolve_program(self) -> Identity:
        path = self._settings.program_keypair_path
        if not path.is_file():
            logger.debug("No program keypair at %s; using pinned program id", path)
            return Identity(public_address=self._settings.program_id)

        program = load_keypair(path)
        if program.public_address != self._settings.program_id:
            logger.warning(
                "Program keypair %s does not match pinned program id %s",
                program.public_address,
                self._settings.program_id,
            )
        return program

    def resolve_target(self) -> DeploymentTarget:
        return DeploymentTarget(
            network_endpoint=self._settings.rpc_url,
            commitment_level=self._settings.commitment,
        )


def _redact_endpoint(endpoint: str) -> str:
    """Drop the query string, which commonly carries an API key."""
    return endpoint.split("?", 1)[0]
