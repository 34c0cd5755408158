"""
Test sequencer: runs the fixed step sequence against one dataset/store pair.
"""

import time
from collections.abc import Callable, Sequence

from fhir_harness.config.logging import get_logger, set_run_id
from fhir_harness.config.settings import Settings
from fhir_harness.context import TestContext
from fhir_harness.errors import HarnessError
from fhir_harness.models import RunReport, StepResult, StepStatus
from fhir_harness.runner import CommandRunner, SubprocessRunner
from fhir_harness.samples import SampleInvoker
from fhir_harness.steps import SETUP, STEPS, Step, delete_dataset, delete_fhir_store

logger = get_logger(__name__)


class TestSequencer:
    """
    Drives the sample scripts in order and records a result per step.

    A failed step does not stop the run; later steps still execute with
    whatever context earlier steps managed to capture. If setup fails, every
    step is skipped. Teardown always runs and never raises.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner | None = None,
        steps: Sequence[Step] = STEPS,
        setup: Step = SETUP,
    ):
        self.settings = settings
        self.runner = runner or SubprocessRunner(timeout=settings.command_timeout)
        self.samples = SampleInvoker(self.runner, settings)
        self.steps = tuple(steps)
        self.setup = setup

    def run(self, context: TestContext | None = None) -> RunReport:
        """
        Run setup, every step, then teardown.

        Args:
            context: Starting context; a fresh one with new IDs by default

        Returns:
            Report with one result for setup and one per step

        Raises:
            MissingConfigurationError: If the required environment is absent
        """
        self.settings.check_preconditions()

        run_id = set_run_id()
        ctx = context or TestContext.from_settings(self.settings)
        report = RunReport(
            run_id=run_id,
            project_id=ctx.project_id,
            dataset_id=ctx.dataset_id,
            fhir_store_id=ctx.fhir_store_id,
            resource_type=ctx.resource_type,
        )
        logger.info(
            "Starting harness run",
            dataset_id=ctx.dataset_id,
            fhir_store_id=ctx.fhir_store_id,
            step_count=len(self.steps),
        )

        try:
            ctx, setup_result = self.execute(self.setup, ctx)
            report.steps.append(setup_result)

            for step in self.steps:
                if setup_result.status != StepStatus.PASSED:
                    report.steps.append(
                        StepResult(
                            name=step.name,
                            description=step.description,
                            status=StepStatus.SKIPPED,
                            message="Setup failed",
                        )
                    )
                    continue
                ctx, result = self.execute(step, ctx)
                report.steps.append(result)
        finally:
            self.teardown(ctx)

        report.resource_id = ctx.resource_id
        report.version_id = ctx.version_id
        logger.info(
            "Finished harness run",
            passed=report.passed,
            failed_count=report.failed_count,
        )
        return report

    def execute(self, step: Step, ctx: TestContext) -> tuple[TestContext, StepResult]:
        """
        Run a single step, converting harness errors into a failed result.

        Returns:
            The context to carry forward (unchanged on failure) and the result
        """
        log = logger.bind(step=step.name)
        start = time.perf_counter()

        try:
            new_ctx = step.run(ctx, self.samples)
        except HarnessError as e:
            duration_ms = (time.perf_counter() - start) * 1000
            log.warning("Step failed", error=e.message)
            return ctx, StepResult(
                name=step.name,
                description=step.description,
                status=StepStatus.FAILED,
                message=e.message,
                error=e.to_dict(),
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start) * 1000
        log.info("Step passed", duration_ms=round(duration_ms, 1))
        return new_ctx, StepResult(
            name=step.name,
            description=step.description,
            status=StepStatus.PASSED,
            duration_ms=duration_ms,
        )

    def teardown(self, ctx: TestContext) -> None:
        """Best-effort deletion of the FHIR store (if still present) and the dataset."""
        if ctx.fhir_store_created:
            self._best_effort("delete_fhir_store", lambda: delete_fhir_store(ctx, self.samples))
        self._best_effort("delete_dataset", lambda: delete_dataset(ctx, self.samples))

    def _best_effort(self, action: str, func: Callable[[], object]) -> None:
        try:
            func()
        except Exception as e:
            # Cleanup failures must not mask the run's own result
            logger.warning("Teardown action failed", action=action, error=str(e))
