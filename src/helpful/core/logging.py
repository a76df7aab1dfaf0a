"""Structured logging for Helpful.

structlog renders JSON in production and colored console output during
development. Modules obtain a logger with ``get_logger(__name__)`` and log
events with keyword fields instead of formatted strings.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from helpful.core.config import Settings, get_settings


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the logger name, falling back to ``helpful`` for print loggers."""
    event_dict["logger"] = logger.name if hasattr(logger, "name") else "helpful"
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename structlog's ``event`` key to ``message``."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Optional settings instance. Loaded from the environment if omitted.
    """
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        rename_message_field,
    ]

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
        cache_logger = False
    else:
        renderer = structlog.processors.JSONRenderer()
        cache_logger = True

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=cache_logger,
    )

    # Third-party libraries (sqlalchemy, httpx) log through the stdlib
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name. Defaults to ``helpful``.

    Returns:
        BoundLogger: Configured structured logger instance.
    """
    return structlog.get_logger(name or "helpful")


def bind_account_id(account_id: str) -> None:
    """Attach an account ID to every log entry of the current context."""
    structlog.contextvars.bind_contextvars(account_id=account_id)


def clear_context() -> None:
    """Drop all context variables bound for the current unit of work."""
    structlog.contextvars.clear_contextvars()
