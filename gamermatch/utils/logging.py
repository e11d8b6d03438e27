"""Structured logging for GamerMatch.

Every log line carries the app name and environment, plus whatever the API
middleware bound for the current request (request id, path). Swipe, match and
block events are logged as key-value pairs so they can be filtered by profile
or match id once rendered as JSON.
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional

import structlog
from structlog.types import Processor

from gamermatch.config import settings

# Human-readable output; everywhere else gets one JSON object per line
CONSOLE_ENVIRONMENTS = {"development", "test"}

# Chatty libraries kept at WARNING unless DEBUG is on
QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3", "httpx")


def add_app_context(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict.setdefault("app", settings.APP_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route standard library and structlog output through one pipeline.

    `level` overrides `LOG_LEVEL`, which the uvicorn entry point and tests use.
    The renderer is picked from ENVIRONMENT (see `CONSOLE_ENVIRONMENTS`).
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stdout,
    )
    if not settings.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.ENVIRONMENT.lower() in CONSOLE_ENVIRONMENTS:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Module-level logger, optionally pre-bound (e.g. `component="swipes"`)."""
    return structlog.get_logger(name).bind(**initial_values)  # type: ignore


def bind_request_context(**values: Any) -> None:
    """Replace the per-request context; called once per API request by the middleware."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_error(
    logger: structlog.stdlib.BoundLogger,
    error: Exception,
    message: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an exception with its GamerMatch error code and details.

    Used where a failure is absorbed rather than raised: a match step that
    failed after the swipe was stored, or an unexpected error the engine turns
    into a `persistence_failure` outcome.

    Args:
        logger (structlog.stdlib.BoundLogger): The logger instance to use.
        error (Exception): The exception to log.
        message (Optional[str], optional): Custom message. Defaults to "An error occurred".
        extra (Optional[Dict[str, Any]], optional): Ids of the profiles, swipe or match involved.
    """
    context = dict(extra or {})
    context["error_type"] = error.__class__.__name__
    context["error_message"] = str(error)

    if hasattr(error, "details"):
        context["error_details"] = error.details
    if hasattr(error, "code"):
        context["error_code"] = getattr(error.code, "value", error.code)

    logger.error(message or "An error occurred", **context, exc_info=error)
