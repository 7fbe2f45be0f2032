"""Adversarial tests — the chain CLI's exit code is not trusted on its own.

A submission can report success and still leave the program absent,
non-executable, or only partially written.  The workflow must end in
Failed(published, ...) in every such case.
"""

from __future__ import annotations

import pytest

from deployforge.core.orchestrator import Orchestrator
from deployforge.models.artifacts import BuildMode
from deployforge.models.stages import WorkflowStage


@pytest.fixture
def ready(settings, runner, chain, write_artifact, deployer_address, program_keypair_file):
    chain.balances[deployer_address] = 10_000_000_000
    runner.on("anchor", effect=lambda _: write_artifact(BuildMode.REPRODUCIBLE))
    return Orchestrator(settings, runner=runner, chain_factory=lambda _t: chain)


class TestReadBackDistrust:
    def test_exit_zero_program_absent(self, ready, runner):
        outcome = ready.deploy()
        assert runner.ran("solana", "program", "deploy")
        assert outcome.failed_stage == WorkflowStage.PUBLISHED
        assert outcome.error_type == "PublishVerificationFailedError"
        assert outcome.exit_code == 1

    def test_exit_zero_program_not_executable(self, ready, runner, chain, program_address):
        runner.on(
            "solana",
            effect=lambda _: chain.set_account(program_address, executable=False),
        )
        outcome = ready.deploy()
        assert outcome.failed_stage == WorkflowStage.PUBLISHED
        assert outcome.error_type == "PublishVerificationFailedError"

    def test_nonzero_exit_even_if_account_exists(self, ready, runner, chain, program_address):
        # A previous deploy left a live account; a failed resubmission is still a failure.
        chain.set_account(program_address)
        runner.on("solana", exit_code=1)
        outcome = ready.deploy()
        assert outcome.failed_stage == WorkflowStage.PUBLISHED
        assert outcome.error_type == "PublishToolFailedError"

    def test_empty_binary_never_reaches_publish(self, ready, runner, write_artifact):
        runner.on(
            "anchor",
            effect=lambda _: write_artifact(BuildMode.REPRODUCIBLE, b""),
        )
        outcome = ready.deploy()
        assert outcome.failed_stage == WorkflowStage.BUILT
        assert not runner.ran("solana")
