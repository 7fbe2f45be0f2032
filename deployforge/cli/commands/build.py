"""``deployforge build`` — standalone build that reports the artifact digest.

Useful before a deploy to compare the SHA-256 digest with an independent
rebuild.  Nothing is published.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from deployforge.bridge.process import SubprocessRunner
from deployforge.cli._common import load_settings
from deployforge.core.errors import BuildError
from deployforge.models.artifacts import BuildMode
from deployforge.monitor.renderer import WorkflowRenderer
from deployforge.stages.build import BuildInvoker

console = Console()


def build_cmd(
    build_mode: BuildMode = typer.Option(
        BuildMode.CONTAINER,
        "--build-mode",
        "-m",
        help="Build mode (standard, reproducible, container).",
    ),
    project_dir: Path = typer.Option(
        None, "--project-dir", "-C", help="Program project directory."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Build the program binary and print its size and SHA-256 digest."""
    settings = load_settings(verbose=verbose, project_dir=project_dir)
    renderer = WorkflowRenderer(console)
    renderer.section(f"Building {settings.program_name} ({build_mode.value})")

    try:
        artifact = BuildInvoker(settings, SubprocessRunner()).build(build_mode)
    except BuildError as exc:
        renderer.error(f"{type(exc).__name__}: {exc}")
        raise typer.Exit(code=1)

    renderer.artifact(artifact)
    renderer.info("Next: `deployforge deploy`, then `deployforge verify`")
