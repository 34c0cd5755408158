"""
Command runner capability.

The sequencer never calls ``subprocess`` directly: it goes through a
``CommandRunner`` so harness-level tests can substitute deterministic output.
"""

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from fhir_harness.config.logging import get_logger
from fhir_harness.errors import CommandFailedError

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one program invocation."""

    stdout: str
    stderr: str = ""
    exit_status: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class CommandRunner(Protocol):
    """Anything that can run a program and capture its output."""

    def invoke(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult: ...


def _as_text(output: str | bytes | None) -> str:
    # TimeoutExpired carries bytes even when text mode was requested
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class SubprocessRunner:
    """Runs programs as blocking subprocesses."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def invoke(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """
        Run ``program`` with ``args`` and wait for it to exit.

        A non-zero exit status is returned, not raised; only failures to start
        the program or a timeout raise.

        Raises:
            CommandFailedError: If the program cannot be started or times out
        """
        command = [program, *args]
        logger.debug("Running command", command=command, cwd=str(cwd) if cwd else None)

        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(
                command,
                None,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
                reason=f"timed out after {self.timeout}s",
            ) from e
        except OSError as e:
            raise CommandFailedError(command, None, reason=str(e)) from e

        return CommandResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_status=completed.returncode,
        )
