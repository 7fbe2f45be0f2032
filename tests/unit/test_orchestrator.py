"""Tests for the Orchestrator — stage sequencing and first-failure halting."""

from __future__ import annotations

import pytest

from deployforge.core.errors import ChainQueryError
from deployforge.core.orchestrator import Orchestrator
from deployforge.models.artifacts import BuildMode
from deployforge.models.stages import WorkflowKind, WorkflowStage

SOL = 1_000_000_000


@pytest.fixture
def orchestrator_for(settings, runner, chain):
    """Factory: an Orchestrator wired to the fakes, with optional settings overrides."""

    def _factory(**overrides):
        s = settings.model_copy(update=overrides) if overrides else settings
        return Orchestrator(s, runner=runner, chain_factory=lambda _target: chain)

    return _factory


@pytest.fixture
def funded(chain, deployer_address):
    chain.balances[deployer_address] = 5 * SOL
    return chain


def _builds(runner, write_artifact, mode):
    runner.on("anchor", effect=lambda _: write_artifact(mode))


def _publishes(runner, chain, address):
    runner.on("solana", "program", "deploy", effect=lambda _: chain.set_account(address))


class TestDeploy:
    def test_happy_path(
        self, orchestrator_for, runner, funded, write_artifact, program_keypair_file, program_address
    ):
        _builds(runner, write_artifact, BuildMode.REPRODUCIBLE)
        _publishes(runner, funded, program_address)

        outcome = orchestrator_for().deploy()

        assert outcome.succeeded
        assert outcome.exit_code == 0
        assert outcome.program_address == program_address
        assert outcome.artifact is not None
        assert outcome.artifact.mode == BuildMode.REPRODUCIBLE
        assert [t.to_stage for t in outcome.transitions] == [
            WorkflowStage.CONFIG_RESOLVED,
            WorkflowStage.PRECONDITIONS_CHECKED,
            WorkflowStage.BUILT,
            WorkflowStage.PUBLISHED,
            WorkflowStage.DONE,
        ]
        assert runner.ran("anchor", "build", "--verifiable")

    def test_missing_program_keypair_halts_before_build(self, orchestrator_for, runner, funded):
        outcome = orchestrator_for().deploy()

        assert outcome.final_stage == WorkflowStage.FAILED
        assert outcome.failed_stage == WorkflowStage.PRECONDITIONS_CHECKED
        assert outcome.error_type == "ProgramKeypairMissingError"
        assert runner.calls == []

    def test_build_failure_halts_before_publish(
        self, orchestrator_for, runner, funded, program_keypair_file
    ):
        runner.on("anchor", exit_code=1)

        outcome = orchestrator_for().deploy()

        assert outcome.failed_stage == WorkflowStage.BUILT
        assert outcome.error_type == "BuildToolFailedError"
        assert not runner.ran("solana")
        assert outcome.exit_code == 1

    def test_low_balance_warns_and_continues(
        self, orchestrator_for, runner, chain, write_artifact, program_keypair_file, program_address
    ):
        _builds(runner, write_artifact, BuildMode.REPRODUCIBLE)
        _publishes(runner, chain, program_address)

        outcome = orchestrator_for().deploy()

        assert outcome.succeeded
        assert outcome.preconditions is not None
        assert outcome.preconditions.low_balance
        assert outcome.preconditions.warnings

    def test_build_mode_override(
        self, orchestrator_for, runner, funded, write_artifact, program_keypair_file, program_address
    ):
        _builds(runner, write_artifact, BuildMode.STANDARD)
        _publishes(runner, funded, program_address)

        outcome = orchestrator_for(deploy_build_mode=BuildMode.STANDARD).deploy()

        assert outcome.succeeded
        assert ["anchor", "build"] in runner.commands


class TestUpgrade:
    def test_happy_path_uses_standard_build(
        self, orchestrator_for, runner, funded, write_artifact, program_address
    ):
        funded.set_account(program_address)
        _builds(runner, write_artifact, BuildMode.STANDARD)

        outcome = orchestrator_for().upgrade()

        assert outcome.succeeded
        assert outcome.workflow == WorkflowKind.UPGRADE
        assert ["anchor", "build"] in runner.commands
        deploy = next(c for c in runner.commands if c[:3] == ["solana", "program", "deploy"])
        assert deploy[deploy.index("--program-id") + 1] == program_address

    def test_program_missing(self, orchestrator_for, runner, funded):
        outcome = orchestrator_for().upgrade()

        assert outcome.failed_stage == WorkflowStage.PRECONDITIONS_CHECKED
        assert outcome.error_type == "ProgramNotFoundError"
        assert runner.calls == []


class TestCollaboratorFailures:
    def test_chain_query_error_is_a_failed_stage(self, settings, runner, program_keypair_file):
        class BrokenChain:
            def get_balance(self, address):
                raise ChainQueryError("getBalance failed: connection refused")

            def get_account_info(self, address):
                raise AssertionError("unreachable")

            def get_slot(self):
                raise AssertionError("unreachable")

        outcome = Orchestrator(
            settings, runner=runner, chain_factory=lambda _t: BrokenChain()
        ).deploy()

        assert outcome.failed_stage == WorkflowStage.PRECONDITIONS_CHECKED
        assert outcome.error_type == "ChainQueryError"

    def test_config_failure_records_no_endpoint_calls(self, settings, runner, tmp_path):
        created = []
        s = settings.model_copy(update={"deployer_keypair_path": tmp_path / "missing.json"})

        outcome = Orchestrator(
            s, runner=runner, chain_factory=lambda t: created.append(t)
        ).deploy()

        assert outcome.failed_stage == WorkflowStage.CONFIG_RESOLVED
        assert outcome.error_type == "MissingFileError"
        assert created == []
        assert outcome.deployer_address is None
