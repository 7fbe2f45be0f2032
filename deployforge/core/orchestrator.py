"""Workflow orchestrator — the central coordinator for deploy and upgrade runs.

The Orchestrator wires together the ConfigResolver, PreconditionChecker,
BuildInvoker and PublishInvoker behind a linear WorkflowMachine::

    init -> config_resolved -> preconditions_checked -> built -> published -> done

Each stage is attempted once.  The first ``DeployError`` moves the machine
to ``Failed(stage, error)`` and no later stage runs.  The upgrade workflow
shares the sequence and differs only in the precondition branch
(program must already exist) and the publish mode.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from deployforge.bridge.process import ProcessRunner, SubprocessRunner
from deployforge.bridge.rpc import ChainClient, ChainReader
from deployforge.config import DeploySettings
from deployforge.core.errors import DeployError
from deployforge.core.stage_machine import WorkflowMachine
from deployforge.models.artifacts import BuildArtifact
from deployforge.models.identity import Identity
from deployforge.models.outcome import WorkflowOutcome
from deployforge.models.reports import PreconditionReport
from deployforge.models.stages import WorkflowKind, WorkflowStage
from deployforge.models.targets import DeploymentTarget
from deployforge.monitor.renderer import WorkflowRenderer
from deployforge.stages.build import BuildInvoker
from deployforge.stages.config_resolver import ConfigResolver
from deployforge.stages.preconditions import PreconditionChecker
from deployforge.stages.publish import PublishInvoker, PublishMode

logger = logging.getLogger(__name__)

ChainFactory = Callable[[DeploymentTarget], ChainReader]

_PUBLISH_MODES: dict[WorkflowKind, PublishMode] = {
    WorkflowKind.DEPLOY: PublishMode.INITIAL_DEPLOY,
    WorkflowKind.UPGRADE: PublishMode.UPGRADE,
}


class Orchestrator:
    """Runs the deploy or upgrade workflow end to end.

    Parameters
    ----------
    settings:
        Run settings.  Uses defaults (env-driven) if not provided.
    runner:
        Process backend for build and publish tools.
    chain_factory:
        Builds the chain reader once the target is resolved.  Defaults to
        a JSON-RPC ``ChainClient``.
    renderer:
        Progress output.  Silent if not provided.
    """

    def __init__(
        self,
        settings: DeploySettings | None = None,
        *,
        runner: ProcessRunner | None = None,
        chain_factory: ChainFactory | None = None,
        renderer: WorkflowRenderer | None = None,
    ) -> None:
        self.settings = settings or DeploySettings()
        self.runner = runner or SubprocessRunner()
        self._chain_factory = chain_factory or self._default_chain
        self.renderer = renderer or WorkflowRenderer.quiet()

        self.resolver = ConfigResolver(self.settings)
        self.builder = BuildInvoker(self.settings, self.runner)

    def _default_chain(self, target: DeploymentTarget) -> ChainReader:
        return ChainClient.for_target(target, timeout=self.settings.http_timeout_seconds)

    # ------------------------------------------------------------------
    # Entry workflows
    # ------------------------------------------------------------------

    def deploy(self) -> WorkflowOutcome:
        """First-time deploy of the program binary."""
        return self.run(WorkflowKind.DEPLOY)

    def upgrade(self) -> WorkflowOutcome:
        """Replace the code of an already-deployed program."""
        return self.run(WorkflowKind.UPGRADE)

    def run(self, workflow: WorkflowKind) -> WorkflowOutcome:
        """Execute *workflow* once and return its outcome.

        Never raises ``DeployError``; failures are reported in the outcome.
        """
        machine = WorkflowMachine(workflow)
        r = self.renderer
        target: DeploymentTarget | None = None
        deployer: Identity | None = None
        report: PreconditionReport | None = None
        artifact: BuildArtifact | None = None
        program_address: str | None = None

        r.section(f"Program {workflow.value.capitalize()}")
        stage = WorkflowStage.CONFIG_RESOLVED
        try:
            # 1. Config
            r.section("Checking Prerequisites")
            target, deployer, program = self.resolver.resolve()
            r.success(f"Deployer address verified: {deployer.public_address}")
            r.success(f"Program ID: {program.public_address}")
            machine.advance(stage)

            # 2. Preconditions
            stage = WorkflowStage.PRECONDITIONS_CHECKED
            chain = self._chain_factory(target)
            checker = PreconditionChecker(
                chain,
                self.settings.program_keypair_path,
                min_balance_sol=self.settings.min_balance_sol,
            )
            report = checker.check(target, deployer, program, workflow)
            r.info(f"Deployer balance: {report.balance_sol:.4f} SOL")
            for warning in report.warnings:
                r.warning(warning)
            if report.program_state is not None:
                r.success(f"Program found: {report.program_state.address}")
            machine.advance(stage)

            # 3. Build
            stage = WorkflowStage.BUILT
            mode = (
                self.settings.deploy_build_mode
                if workflow == WorkflowKind.DEPLOY
                else self.settings.upgrade_build_mode
            )
            r.section("Building Program")
            r.info(f"Build mode: {mode.value}")
            artifact = self.builder.build(mode)
            r.artifact(artifact)
            machine.advance(stage)

            # 4. Publish
            stage = WorkflowStage.PUBLISHED
            r.section(f"{'Upgrading' if workflow == WorkflowKind.UPGRADE else 'Deploying'} Program")
            r.warning("This will cost SOL.")
            publisher = PublishInvoker(self.settings, self.runner, chain)
            program_address = publisher.publish(
                artifact, program, deployer, target, _PUBLISH_MODES[workflow]
            )
            r.success(f"Program is executable at: {program_address}")
            machine.advance(stage)

            machine.advance(WorkflowStage.DONE)
        except DeployError as exc:
            logger.error("%s failed at %s: %s", workflow.value, stage.value, exc)
            r.error(f"{type(exc).__name__}: {exc}")
            machine.fail(stage, exc)

        error = machine.error
        outcome = WorkflowOutcome(
            workflow=workflow,
            final_stage=machine.stage,
            failed_stage=machine.failed_stage,
            error=str(error) if error else None,
            error_type=type(error).__name__ if error else None,
            program_address=program_address,
            deployer_address=deployer.public_address if deployer else None,
            network_endpoint=target.network_endpoint if target else None,
            artifact=artifact,
            preconditions=report,
            transitions=machine.transitions,
        )
        r.print_outcome(outcome)
        return outcome
