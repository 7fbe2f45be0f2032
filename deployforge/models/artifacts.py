"""Build artifact models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class BuildMode(str, Enum):
    """How the program binary is produced.

    - ``standard``     : plain ``anchor build``
    - ``reproducible`` : ``anchor build --verifiable`` (dockerised by anchor)
    - ``container``    : project Dockerfile, binary copied out of the image
    """

    STANDARD = "standard"
    REPRODUCIBLE = "reproducible"
    CONTAINER = "container"


class BuildArtifact(BaseModel):
    """The compiled program binary on disk.

    The digest is the SHA-256 hex of the file bytes.  It is reported for
    manual cross-check against an independent rebuild; the workflow does
    not enforce it.
    """

    model_config = ConfigDict(frozen=True)

    file_path: Path
    size_bytes: int
    digest: str
    mode: BuildMode = BuildMode.STANDARD

    @property
    def content_address(self) -> str:
        return f"sha256:{self.digest}"

    @property
    def size_kb(self) -> float:
        return self.size_bytes / 1024
