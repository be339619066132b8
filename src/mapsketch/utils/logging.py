"""Structured logging configuration using structlog.

The active drawing session and mode are bound as structlog context variables,
so every event logged while a shape is being drawn carries them. Output is
JSON for production or a colored console for dev.
"""

import logging
import sys
from typing import cast

import structlog
from structlog.types import Processor

from mapsketch.config import settings

_CORRELATION_KEYS = ("session_id", "mode")


def set_correlation_context(
    session_id: str | None = None,
    mode: str | None = None,
) -> None:
    """Set correlation IDs for the current context.

    Args:
        session_id: Identifier of the active drawing session
        mode: Drawing mode the session belongs to (e.g. "polygon")
    """
    bound = {"session_id": session_id, "mode": mode}
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in bound.items() if value is not None}
    )


def clear_correlation_context() -> None:
    """Unbind the session and mode from the logging context."""
    structlog.contextvars.unbind_contextvars(*_CORRELATION_KEYS)


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the given level and format.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to match
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
