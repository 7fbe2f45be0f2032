"""Shared CLI helpers — settings construction and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from deployforge.config import DeploySettings


def configure_logging(level: str) -> None:
    """Route stdlib logging through Rich at *level*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


def load_settings(
    *,
    verbose: bool = False,
    rpc_url: str | None = None,
    project_dir: Path | None = None,
    **overrides: Any,
) -> DeploySettings:
    """Build the run's settings once, applying CLI overrides on top of env."""
    explicit: dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if rpc_url is not None:
        explicit["rpc_url"] = rpc_url
    if project_dir is not None:
        explicit["project_dir"] = project_dir

    settings = DeploySettings(**explicit)
    configure_logging("DEBUG" if verbose else settings.log_level)
    return settings
