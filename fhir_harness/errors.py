"""
Custom error types for the FHIR samples harness.

This module provides specific error classes for the ways a harness run can
fail, so the sequencer can tell a failed step apart from a broken run.
"""

from typing import Any


class HarnessError(Exception):
    """Base exception for all harness errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# Configuration Errors


class ConfigurationError(HarnessError):
    """Raised when there's a configuration error."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, config_key: str, description: str | None = None):
        self.config_key = config_key
        message = f"Missing required configuration: {config_key}"
        if description:
            message += f". {description}"
        super().__init__(
            message,
            details={"config_key": config_key, "description": description},
        )


# Sample Invocation Errors


class CommandFailedError(HarnessError):
    """Raised when a sample program exits with an error or cannot be run."""

    def __init__(
        self,
        command: list[str],
        exit_status: int | None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ):
        self.command = command
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr
        if reason:
            message = f"Command {' '.join(command)} failed: {reason}"
        else:
            message = f"Command {' '.join(command)} exited with status {exit_status}"
        super().__init__(
            message,
            details={
                "command": command,
                "exit_status": exit_status,
                "stderr": stderr,
            },
        )


# Step Errors


class StepError(HarnessError):
    """Base exception for errors that fail a single step."""

    pass


class OutputMismatchError(StepError):
    """Raised when a sample's output does not satisfy the expected contract."""

    def __init__(self, expectation: str, output: str):
        self.expectation = expectation
        self.output = output
        message = f"Output did not match: expected {expectation}, got {output!r}"
        super().__init__(
            message,
            details={"expectation": expectation, "output": output},
        )


class MissingContextError(StepError):
    """Raised when a step needs an identifier an earlier step never captured."""

    def __init__(self, field_name: str, step: str | None = None):
        self.field_name = field_name
        self.step = step
        message = f"Missing {field_name} from an earlier step"
        if step:
            message = f"Step '{step}' requires {field_name} from an earlier step"
        super().__init__(
            message,
            details={"field_name": field_name, "step": step},
        )
