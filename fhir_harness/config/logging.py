"""
Structured logging configuration for the harness.

This module provides structlog-based logging with a per-run correlation ID so
every event emitted during one sequence can be grouped together.
"""

import logging
import sys
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import structlog


@dataclass
class LoggingConfig:
    """Logging configuration."""

    run_id_length: int = 8
    colors: bool = True


# Default logging configuration
_logging_config = LoggingConfig()


# Context variable for the run correlation ID
run_id_var: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Get the current run ID from context."""
    return run_id_var.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set a new run ID in context. Generates one if not provided."""
    new_id = run_id or str(uuid.uuid4())[: _logging_config.run_id_length]
    run_id_var.set(new_id)
    return new_id


def add_run_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add the run ID to log events."""
    run_id = get_run_id()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
) -> None:
    """
    Configure structured logging for the harness.

    Logs go to stderr so they never mix with the report printed on stdout.

    Args:
        level: Log level (DEBUG, INFO, WARN, ERROR)
        json_format: If True, output JSON logs; otherwise, use console format
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Callable] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_run_id,
    ]

    if json_format:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=_logging_config.colors),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
