"""Signing identity model.

Two identities exist per run: the deployer (pays fees, signs) and the
program (the artifact's on-chain address).  Secret material is held as
``SecretBytes`` so it is masked in ``repr()``, ``str()`` and model dumps.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, SecretBytes


class Identity(BaseModel):
    """A base58 public address with optional secret key material."""

    model_config = ConfigDict(frozen=True)

    public_address: str
    secret_material: SecretBytes | None = None
    source_path: Path | None = None  # keypair file the identity was loaded from

    @property
    def has_secret(self) -> bool:
        return self.secret_material is not None

    def __str__(self) -> str:
        return self.public_address
