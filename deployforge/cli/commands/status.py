"""``deployforge status`` — read-only check of deployer and program state.

Reports deployer balance, whether the program exists and is executable,
its owner and data length, whether it is upgradeable, and the current
slot.  Does not enforce the pinned deployer address.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from deployforge.bridge.rpc import ChainClient
from deployforge.cli._common import load_settings
from deployforge.core.errors import DeployError
from deployforge.monitor.renderer import WorkflowRenderer
from deployforge.stages.config_resolver import ConfigResolver
from deployforge.stages.status import StatusChecker

console = Console()


def status_cmd(
    rpc_url: str = typer.Option(
        None, "--rpc-url", help="Override the network endpoint."
    ),
    project_dir: Path = typer.Option(
        None, "--project-dir", "-C", help="Program project directory."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Check program status and deployer balance."""
    settings = load_settings(verbose=verbose, rpc_url=rpc_url, project_dir=project_dir)
    renderer = WorkflowRenderer(console)
    renderer.section("Program Status Check")

    try:
        target, deployer, program = ConfigResolver(settings).resolve(enforce_pinned=False)
        renderer.info(f"Deployer: {deployer.public_address}")
        renderer.info(f"Checking program: {program.public_address}")
        chain = ChainClient.for_target(target, timeout=settings.http_timeout_seconds)
        report = StatusChecker(chain).check(target, deployer, program)
    except DeployError as exc:
        renderer.error(f"Failed to check status: {exc}")
        raise typer.Exit(code=1)

    renderer.print_status(report)
