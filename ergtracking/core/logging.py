"""Structured logging configuration using structlog."""

import logging
import sys
import uuid
from typing import Optional

import structlog
from structlog.typing import EventDict, Processor

from ergtracking.core.config import Settings, get_settings

_context: dict[str, str] = {}


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log entries."""
    event_dict.update(_context)
    return event_dict


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for the application.

    Args:
        settings: Settings to read level and format from (default: environment)
    """
    settings = settings or get_settings()
    _context.update(app=settings.app_name, env=settings.app_env)
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.debug:
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderer,  # type: ignore
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def bind_request_context(method: str, path: str, request_id: Optional[str] = None) -> str:
    """Attach request details to every log entry of the current request.

    Returns:
        The request id bound to the context
    """
    request_id = request_id or uuid.uuid4().hex[:16]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    return request_id


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


setup_logging()
