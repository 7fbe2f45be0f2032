"""``deployforge deploy`` / ``deployforge upgrade`` — the mutating workflows.

Both run the full sequence (config -> prerequisites -> build -> publish)
and exit 1 at the first failed stage.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from deployforge.cli._common import load_settings
from deployforge.core.orchestrator import Orchestrator
from deployforge.models.artifacts import BuildMode
from deployforge.models.stages import WorkflowKind
from deployforge.monitor.renderer import WorkflowRenderer

console = Console()


def _run(
    workflow: WorkflowKind,
    *,
    build_mode: BuildMode | None,
    rpc_url: str | None,
    project_dir: Path | None,
    verbose: bool,
) -> None:
    mode_field = (
        "deploy_build_mode" if workflow == WorkflowKind.DEPLOY else "upgrade_build_mode"
    )
    settings = load_settings(
        verbose=verbose,
        rpc_url=rpc_url,
        project_dir=project_dir,
        **{mode_field: build_mode},
    )
    orchestrator = Orchestrator(settings, renderer=WorkflowRenderer(console))
    outcome = orchestrator.run(workflow)
    raise typer.Exit(code=outcome.exit_code)


def deploy_cmd(
    build_mode: BuildMode = typer.Option(
        None,
        "--build-mode",
        "-m",
        help="Override the deploy build mode (standard, reproducible, container).",
    ),
    rpc_url: str = typer.Option(
        None, "--rpc-url", help="Override the network endpoint."
    ),
    project_dir: Path = typer.Option(
        None, "--project-dir", "-C", help="Program project directory."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Build and deploy the program for the first time.

    Requires the program keypair at target/deploy/<lib>-keypair.json and a
    deployer keypair matching the pinned deployer address.
    """
    _run(
        WorkflowKind.DEPLOY,
        build_mode=build_mode,
        rpc_url=rpc_url,
        project_dir=project_dir,
        verbose=verbose,
    )


def upgrade_cmd(
    build_mode: BuildMode = typer.Option(
        None,
        "--build-mode",
        "-m",
        help="Override the upgrade build mode (standard, reproducible, container).",
    ),
    rpc_url: str = typer.Option(
        None, "--rpc-url", help="Override the network endpoint."
    ),
    project_dir: Path = typer.Option(
        None, "--project-dir", "-C", help="Program project directory."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Build and upgrade the already-deployed program.

    The program account must exist on-chain and be executable.
    """
    _run(
        WorkflowKind.UPGRADE,
        build_mode=build_mode,
        rpc_url=rpc_url,
        project_dir=project_dir,
        verbose=verbose,
    )
