"""Keypair file loading — Ed25519 via PyNaCl, base58 addresses.

A keypair file is a JSON array of 64 integers: the 32-byte Ed25519 seed
followed by the 32-byte public key.  The loader re-derives the public key
from the seed and refuses files whose halves disagree.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import base58
import nacl.signing
from pydantic import SecretBytes

from deployforge.core.errors import MalformedIdentityError, MissingFileError
from deployforge.models.identity import Identity

logger = logging.getLogger(__name__)

KEYPAIR_LENGTH = 64
SEED_LENGTH = 32


def encode_address(public_key: bytes) -> str:
    """Base58-encode a 32-byte public key."""
    return base58.b58encode(public_key).decode("ascii")


def parse_keypair_bytes(raw: object, *, source: str = "<memory>") -> bytes:
    """Validate the decoded JSON of a keypair file and return its 64 bytes."""
    if not isinstance(raw, list) or len(raw) != KEYPAIR_LENGTH:
        raise MalformedIdentityError(
            f"{source}: expected a JSON array of {KEYPAIR_LENGTH} integers"
        )
    if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in raw):
        raise MalformedIdentityError(f"{source}: keypair values must be bytes (0-255)")
    return bytes(raw)


def identity_from_secret(secret: bytes, *, source_path: Path | None = None) -> Identity:
    """Derive an Identity from 64 bytes of keypair material."""
    source = str(source_path) if source_path else "<memory>"
    signing_key = nacl.signing.SigningKey(secret[:SEED_LENGTH])
    public_key = bytes(signing_key.verify_key)
    if public_key != secret[SEED_LENGTH:]:
        raise MalformedIdentityError(
            f"{source}: public key half does not match the seed"
        )
    return Identity(
        public_address=encode_address(public_key),
        secret_material=SecretBytes(secret),
        source_path=source_path,
    )


def load_keypair(path: Path) -> Identity:
    """Load and validate a keypair file.

    Raises
    ------
    MissingFileError
        If *path* does not exist.
    MalformedIdentityError
        If the file is unreadable, not JSON, or not a consistent keypair.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise MissingFileError(f"Keypair not found at: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise MalformedIdentityError(f"{path}: cannot parse keypair ({exc})") from exc

    identity = identity_from_secret(parse_keypair_bytes(raw, source=str(path)), source_path=path)
    logger.debug("Loaded keypair %s from %s", identity.public_address, path)
    return identity
