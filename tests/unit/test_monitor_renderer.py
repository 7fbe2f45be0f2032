"""Tests for WorkflowRenderer — outcome panels and report output."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console
from rich.panel import Panel

from deployforge.core.errors import BuildToolFailedError
from deployforge.core.stage_machine import WorkflowMachine
from deployforge.models.artifacts import BuildArtifact, BuildMode
from deployforge.models.chain import OnChainProgramState
from deployforge.models.outcome import WorkflowOutcome
from deployforge.models.reports import StatusReport
from deployforge.models.stages import WorkflowKind, WorkflowStage
from deployforge.models.verification import VerificationResult, VerificationStatus
from deployforge.monitor.renderer import WorkflowRenderer


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def renderer(output) -> WorkflowRenderer:
    return WorkflowRenderer(Console(file=output, width=120, color_system=None))


def _failed_outcome() -> WorkflowOutcome:
    machine = WorkflowMachine(WorkflowKind.UPGRADE)
    machine.advance(WorkflowStage.CONFIG_RESOLVED)
    machine.advance(WorkflowStage.PRECONDITIONS_CHECKED)
    exc = BuildToolFailedError(["anchor", "build"], BuildMode.STANDARD, 1)
    machine.fail(WorkflowStage.BUILT, exc)
    return WorkflowOutcome(
        workflow=WorkflowKind.UPGRADE,
        final_stage=machine.stage,
        failed_stage=machine.failed_stage,
        error=str(exc),
        error_type=type(exc).__name__,
        transitions=machine.transitions,
    )


class TestOutcome:
    def test_render_returns_panel(self, renderer):
        assert isinstance(renderer.render_outcome(_failed_outcome()), Panel)

    def test_failure_names_stage_and_error(self, renderer, output):
        renderer.print_outcome(_failed_outcome())
        text = output.getvalue()
        assert "Failed(built, BuildToolFailedError)" in text
        assert "NOT REACHED" in text
        assert "Next steps" not in text

    def test_success_shows_next_steps(self, renderer, output):
        machine = WorkflowMachine(WorkflowKind.DEPLOY)
        for stage in (
            WorkflowStage.CONFIG_RESOLVED,
            WorkflowStage.PRECONDITIONS_CHECKED,
            WorkflowStage.BUILT,
            WorkflowStage.PUBLISHED,
            WorkflowStage.DONE,
        ):
            machine.advance(stage)
        outcome = WorkflowOutcome(
            workflow=WorkflowKind.DEPLOY,
            final_stage=machine.stage,
            program_address="Prog111",
            transitions=machine.transitions,
        )
        renderer.print_outcome(outcome)
        text = output.getvalue()
        assert "Deploy complete!" in text
        assert "Prog111" in text
        assert "Next steps" in text


class TestProgressLines:
    def test_artifact_reports_size_and_digest(self, renderer, output):
        renderer.artifact(
            BuildArtifact(file_path=Path("p.so"), size_bytes=2048, digest="f" * 64)
        )
        text = output.getvalue()
        assert "Program size: 2.00 KB" in text
        assert "SHA256 hash: " + "f" * 64 in text

    def test_bracketed_text_printed_literally(self, renderer, output):
        renderer.error("Keypair not found: /keys/[prod]/id.json")
        renderer.warning("rpc said [/oops]")
        text = output.getvalue()
        assert "/keys/[prod]/id.json" in text
        assert "rpc said [/oops]" in text

    def test_outcome_error_printed_literally(self, renderer, output):
        outcome = _failed_outcome().model_copy(update={"error": "bad path [/x] in [bold]"})
        renderer.print_outcome(outcome)
        assert "bad path [/x] in [bold]" in output.getvalue()

    def test_quiet_renderer_prints_nothing(self, capsys):
        WorkflowRenderer.quiet().warning("hidden")
        assert "hidden" not in capsys.readouterr().out


class TestReports:
    def _report(self, **state) -> StatusReport:
        return StatusReport(
            network_endpoint="https://rpc.example/?api-key=secret",
            deployer_address="Deployer111",
            deployer_lamports=1_500_000_000,
            program_state=OnChainProgramState(address="Prog111", **state),
            slot=99,
        )

    def test_status_absent(self, renderer, output):
        renderer.print_status(self._report())
        text = output.getvalue()
        assert "not found on-chain" in text
        assert "1.5000 SOL" in text
        assert "secret" not in text

    def test_status_live(self, renderer, output):
        renderer.print_status(self._report(exists=True, executable=True, data_length=36))
        text = output.getvalue()
        assert "deployed and executable" in text
        assert "36 bytes" in text

    def test_verification(self, renderer, output):
        renderer.print_verification(
            VerificationResult(
                request_id="job-1", program_address="Prog111", status=VerificationStatus.SUCCESS
            )
        )
        text = output.getvalue()
        assert "VERIFIED" in text
        assert "job-1" in text

    def test_json(self, renderer, output):
        renderer.print_json({"is_verified": False})
        assert '"is_verified": false' in output.getvalue()
