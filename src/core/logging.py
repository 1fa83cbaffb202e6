"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__)).
Logfire is configured once at startup and the coordinator wraps its operations
in spans.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Tasks loaded", count=12, source="remote")
"""

import logging

import logfire

from src.core.config import Settings, get_settings


def configure_logfire(settings: Settings | None = None) -> None:
    """Configure Pydantic Logfire and route standard logging through it.

    Nothing is sent unless a Logfire token is configured.
    """
    settings = settings or get_settings()
    logfire.configure(
        token=settings.logfire_token,
        service_name="taskpilot",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(level=logging.INFO, handlers=[logfire.LogfireLoggingHandler()])

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Create a span around a coordinator operation.

    Usage:
        with span("sync_coordinator.load_tasks"):
            ...
    """
    return logfire.span(name, **attributes)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (task_id, operation, status, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)
