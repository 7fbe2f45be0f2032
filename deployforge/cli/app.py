"""Main Typer application — imports and registers all CLI commands.

Entry point: ``deployforge`` (configured via pyproject.toml scripts).

Commands: deploy, upgrade, status, build, verify, verify-status, verify-logs.
"""

from __future__ import annotations

import typer

from deployforge.cli.commands.build import build_cmd
from deployforge.cli.commands.status import status_cmd
from deployforge.cli.commands.verify import (
    verify_cmd,
    verify_logs_cmd,
    verify_status_cmd,
)
from deployforge.cli.commands.workflow import deploy_cmd, upgrade_cmd

app = typer.Typer(
    name="deployforge",
    help="deployforge: deploy, upgrade and verify an on-chain program.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="deploy", help="Build and deploy the program to the network.")(deploy_cmd)
app.command(name="upgrade", help="Build and upgrade the deployed program.")(upgrade_cmd)
app.command(name="status", help="Check program status and deployer balance.")(status_cmd)
app.command(name="build", help="Build the program and report its SHA-256 digest.")(build_cmd)
app.command(name="verify", help="Submit a source verification request.")(verify_cmd)
app.command(name="verify-status", help="Poll source verification status.")(verify_status_cmd)
app.command(name="verify-logs", help="Fetch source verification logs.")(verify_logs_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
