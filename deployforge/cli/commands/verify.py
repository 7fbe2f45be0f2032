"""``deployforge verify`` / ``verify-status`` / ``verify-logs``.

Submits the published program for source verification, polls the
service's view of it, and fetches build logs.  None of these mutate
on-chain state.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from deployforge.bridge.process import SubprocessRunner
from deployforge.bridge.verify_api import VerifyApiClient
from deployforge.cli._common import load_settings
from deployforge.config import DeploySettings
from deployforge.core.errors import VerificationError
from deployforge.monitor.renderer import WorkflowRenderer
from deployforge.stages.verification import VerificationRequester

console = Console()


def _requester(settings: DeploySettings) -> VerificationRequester:
    client = VerifyApiClient(settings.verify_api_url, timeout=settings.http_timeout_seconds)
    return VerificationRequester(settings, client, SubprocessRunner())


def verify_cmd(
    program_id: str = typer.Option(
        None, "--program-id", "-p", help="Program address (defaults to the pinned id)."
    ),
    repo_url: str = typer.Option(
        None, "--repo-url", help="Source repository URL."
    ),
    project_dir: Path = typer.Option(
        None, "--project-dir", "-C", help="Checkout used to resolve the commit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Submit a source verification request for the program."""
    settings = load_settings(verbose=verbose, project_dir=project_dir, repo_url=repo_url)
    renderer = WorkflowRenderer(console)
    requester = _requester(settings)
    renderer.section("Verifying via attestation service")

    request = requester.prepare_request(program_id or settings.program_id)
    renderer.info(f"Repository: {request.repository_url}")
    renderer.info(f"Program ID: {request.program_address}")
    renderer.info(f"Commit: {request.commit_hash}")
    renderer.info(f"Library: {request.library_name}")
    if request.uses_placeholder_commit:
        renderer.warning("No local commit found; sending placeholder commit hash")

    try:
        result = requester.request_verification(request)
    except VerificationError as exc:
        renderer.error(f"Verification request failed: {exc}")
        raise typer.Exit(code=1)

    renderer.print_verification(result)
    renderer.info("Run `deployforge verify-status` to check progress")


def verify_status_cmd(
    program_id: str = typer.Option(
        None, "--program-id", "-p", help="Program address (defaults to the pinned id)."
    ),
    raw: bool = typer.Option(False, "--raw", help="Print the raw service response."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Show the verification service's current status for the program."""
    settings = load_settings(verbose=verbose)
    renderer = WorkflowRenderer(console)
    renderer.section("Checking Verification Status")

    try:
        result = _requester(settings).poll_status(program_id or settings.program_id)
    except VerificationError as exc:
        renderer.error(f"Failed to check status: {exc}")
        raise typer.Exit(code=1)

    renderer.print_verification(result)
    if raw:
        renderer.print_json(result.raw)


def verify_logs_cmd(
    program_id: str = typer.Option(
        None, "--program-id", "-p", help="Program address (defaults to the pinned id)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Fetch the verification service's build logs for the program."""
    settings = load_settings(verbose=verbose)
    renderer = WorkflowRenderer(console)
    renderer.section("Verification Logs")

    try:
        logs = _requester(settings).fetch_logs(program_id or settings.program_id)
    except VerificationError as exc:
        renderer.error(f"Failed to fetch logs: {exc}")
        raise typer.Exit(code=1)

    renderer.print_json(logs)
