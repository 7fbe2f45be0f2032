"""Rich terminal renderer for workflow progress and reports.

Color scheme
------------
- green     : success / DONE
- red       : error / FAILED
- yellow    : warning
- blue      : section banners and info
- dim       : stages not reached
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deployforge.models.artifacts import BuildArtifact
from deployforge.models.outcome import WorkflowOutcome
from deployforge.models.reports import StatusReport
from deployforge.models.stages import (
    STAGE_DISPLAY_NAMES,
    STAGE_ORDER,
    WorkflowStage,
)
from deployforge.models.verification import VerificationResult, VerificationStatus

_VERIFICATION_STYLES: dict[VerificationStatus, str] = {
    VerificationStatus.SUCCESS: "[bold green]VERIFIED[/bold green]",
    VerificationStatus.PENDING: "[yellow]PENDING[/yellow]",
    VerificationStatus.FAILURE: "[bold red]FAILED[/bold red]",
}


class WorkflowRenderer:
    """Prints workflow progress, summaries and reports.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @classmethod
    def quiet(cls) -> WorkflowRenderer:
        """A renderer that prints nothing (library use, tests)."""
        return cls(Console(quiet=True))

    # ------------------------------------------------------------------
    # Progress lines
    # ------------------------------------------------------------------

    def section(self, title: str) -> None:
        self.console.print()
        self.console.rule(f"[bold blue]{title}[/bold blue]", style="blue")

    def success(self, message: str) -> None:
        self.console.print(f"[green]OK[/green]    {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]INFO[/blue]  {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]WARN[/yellow]  {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]ERROR[/bold red] {escape(message)}")

    def artifact(self, artifact: BuildArtifact) -> None:
        self.success(f"Built {artifact.file_path} ({artifact.mode.value})")
        self.info(f"Program size: {artifact.size_kb:.2f} KB")
        self.info(f"SHA256 hash: {artifact.digest}")
        self.info("This hash must match an independent rebuild for verification to succeed")

    # ------------------------------------------------------------------
    # Workflow outcome
    # ------------------------------------------------------------------

    def render_outcome(self, outcome: WorkflowOutcome) -> Panel:
        """Render a WorkflowOutcome as a Panel with a stage table."""
        lines: list[str] = []
        if outcome.succeeded:
            lines.append(f"[bold green]{outcome.workflow.value.capitalize()} complete![/bold green]")
        else:
            failed = outcome.failed_stage.value if outcome.failed_stage else "?"
            lines.append(
                f"[bold red]Failed({failed}, {outcome.error_type})[/bold red]"
            )
            if outcome.error:
                lines.append(f"[red]{escape(outcome.error)}[/red]")
        lines.append("")
        if outcome.program_address:
            lines.append(f"[bold]Program ID:[/bold] {outcome.program_address}")
        if outcome.deployer_address:
            lines.append(f"[bold]Deployer:[/bold]   {outcome.deployer_address}")
        if outcome.artifact:
            lines.append(f"[bold]SHA256:[/bold]     {outcome.artifact.digest}")
        if outcome.preconditions and outcome.preconditions.warnings:
            lines.append(
                f"[yellow][bold]Warnings:[/bold] {len(outcome.preconditions.warnings)}[/yellow]"
            )

        return Panel(
            Group(self._build_stage_table(outcome), Text(""), Text.from_markup("\n".join(lines))),
            title=f"[bold]{outcome.workflow.value.capitalize()} Summary[/bold]",
            border_style="green" if outcome.succeeded else "red",
            padding=(1, 2),
        )

    def print_outcome(self, outcome: WorkflowOutcome) -> None:
        self.console.print()
        self.console.print(self.render_outcome(outcome))
        if outcome.succeeded:
            self.info("Next steps:")
            self.info("1. Check the program on an explorer")
            self.info("2. Run `deployforge verify` to request source verification")

    def _build_stage_table(self, outcome: WorkflowOutcome) -> Table:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=3, justify="right")
        table.add_column("Stage", min_width=16)
        table.add_column("State", min_width=10, justify="center")
        table.add_column("At", min_width=10)

        reached: dict[WorkflowStage, str] = {
            t.to_stage: t.timestamp_utc.strftime("%H:%M:%S") for t in outcome.transitions
        }
        reached.setdefault(WorkflowStage.INIT, "")

        for i, stage in enumerate(STAGE_ORDER):
            if stage in reached:
                state = "[green]PASSED[/green]"
            elif stage == outcome.failed_stage:
                state = "[bold red]FAILED[/bold red]"
            else:
                state = "[dim]NOT REACHED[/dim]"
            when = reached.get(stage, "")
            if stage == outcome.failed_stage:
                when = reached.get(WorkflowStage.FAILED, "")
            table.add_row(str(i), STAGE_DISPLAY_NAMES[stage], state, when or "[dim]-[/dim]")
        return table

    # ------------------------------------------------------------------
    # Status and verification
    # ------------------------------------------------------------------

    def print_status(self, report: StatusReport) -> None:
        state = report.program_state
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Check", min_width=18)
        table.add_column("Value")

        table.add_row("RPC", report.network_endpoint.split("?", 1)[0])
        table.add_row("Deployer", report.deployer_address)
        table.add_row("Deployer balance", f"{report.deployer_balance_sol:.4f} SOL")
        table.add_row("Program", state.address)
        if not state.exists:
            table.add_row("Program state", "[red]not found on-chain[/red]")
        elif not state.executable:
            table.add_row("Program state", "[red]exists but not executable[/red]")
        else:
            table.add_row("Program state", "[green]deployed and executable[/green]")
            table.add_row("Owner", state.owner)
            table.add_row("Data length", f"{state.data_length} bytes")
            table.add_row("Program lamports", f"{state.balance_sol} SOL")
            table.add_row(
                "Upgradeable",
                "[green]yes[/green]" if state.is_upgradeable else "[yellow]no[/yellow]",
            )
        table.add_row("Current slot", str(report.slot))

        border = "green" if state.is_live else "red"
        self.console.print()
        self.console.print(
            Panel(table, title="[bold]Program Status[/bold]", border_style=border, padding=(1, 2))
        )

    def print_verification(self, result: VerificationResult) -> None:
        lines = [
            f"[bold]Program ID:[/bold] {result.program_address}",
            f"[bold]Status:[/bold]     {_VERIFICATION_STYLES[result.status]}",
        ]
        if result.request_id:
            lines.append(f"[bold]Request ID:[/bold] {result.request_id}")
        if result.message:
            lines.append(f"[bold]Message:[/bold]    {escape(result.message)}")
        self.console.print()
        self.console.print(
            Panel(
                "\n".join(lines),
                title="[bold]Source Verification[/bold]",
                border_style="green" if result.status == VerificationStatus.SUCCESS else "yellow",
                padding=(1, 2),
            )
        )

    def print_json(self, payload: dict[str, Any]) -> None:
        self.console.print_json(json.dumps(payload, default=str))
