"""Structured logging with structlog.

Console output in debug, one JSON object per line otherwise. Request and
caller context is carried in contextvars so every line logged while serving
a request is tagged with its request_id and the caller's profile.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Event keys that never reach the log sink with their value intact
REDACTED_KEYS = frozenset(
    {
        "password",
        "hashed_password",
        "access_token",
        "refresh_token",
        "authorization",
        "auth_code",
        "client_secret",
    }
)
REDACTED = "[redacted]"

_NOISY_LOGGERS = ("sqlalchemy.engine", "botocore", "boto3", "urllib3", "httpx", "httpcore")


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace credential-bearing fields before rendering."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        debug: Colored console output instead of JSON.
        level: Log level name; defaults to DEBUG when `debug` is set, INFO otherwise.
    """
    level_name = (level or ("DEBUG" if debug else "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.typing.Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Tag subsequent log lines with the request's correlation ID."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: UUID, role: str, email: str | None = None) -> None:
    """Tag subsequent log lines with the resolved caller.

    The email is only bound when LOG_USER_EMAILS is enabled.
    """
    from src.research_hub.core.config import get_settings

    bind_contextvars(user_id=str(user_id), role=role)
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
