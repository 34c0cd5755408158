"""
Invocation of the sample programs.

Builds the command line for a sample script, runs it in the right directory
with the credentials environment, and turns a failed exit into an error.
"""

import os
from pathlib import Path

from fhir_harness.config.defaults import CREDENTIALS_ENV_VAR, PROJECT_ENV_VAR
from fhir_harness.config.logging import get_logger
from fhir_harness.config.settings import Settings
from fhir_harness.errors import CommandFailedError
from fhir_harness.runner import CommandRunner

logger = get_logger(__name__)


class SampleInvoker:
    """Runs sample scripts through a ``CommandRunner``."""

    def __init__(self, runner: CommandRunner, settings: Settings):
        self.runner = runner
        self.settings = settings

    def environment(self) -> dict[str, str]:
        """Environment for sample subprocesses: the parent's plus credentials."""
        env = os.environ.copy()
        if self.settings.project_id:
            env[PROJECT_ENV_VAR] = self.settings.project_id
        if self.settings.credentials_path:
            env[CREDENTIALS_ENV_VAR] = self.settings.credentials_path
        return env

    def run(self, script: str, *args: str, cwd: Path | None = None) -> str:
        """
        Run a sample script and return its stdout.

        Args:
            script: Script file name, resolved relative to ``cwd``
            *args: Positional arguments for the script
            cwd: Working directory (defaults to the FHIR samples directory)

        Returns:
            Everything the script printed to stdout

        Raises:
            CommandFailedError: If the script exits with a non-zero status
        """
        directory = cwd if cwd is not None else self.settings.samples_dir
        program = self.settings.interpreter
        result = self.runner.invoke(program, [script, *args], cwd=directory, env=self.environment())

        if not result.ok:
            logger.debug(
                "Sample exited with error",
                script=script,
                exit_status=result.exit_status,
                stderr=result.stderr,
            )
            raise CommandFailedError(
                [program, script, *args],
                result.exit_status,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return result.stdout

    def run_dataset_script(self, script: str, *args: str) -> str:
        """Run a script from the datasets samples directory."""
        return self.run(script, *args, cwd=self.settings.datasets_dir)
