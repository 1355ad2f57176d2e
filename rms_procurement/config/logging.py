"""
Structured logging for the procurement service.

Every event carries the service name, environment and (inside a request)
the request id bound by the HTTP middleware. Quantities and costs are
Decimals and are rendered as plain strings so "5.000" stays "5.000" in
JSON output.
"""

import logging
import sys
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from rms_procurement.config.settings import get_settings

_QUIET_LOGGERS = ("aiosqlite", "uvicorn.access", "httpx", "httpcore")

_configured = False


def add_service_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def render_domain_values(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Decimals, dates and enums as strings."""
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _renderer(use_console: bool) -> list[Processor]:
    if use_console:
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(force: bool = False) -> None:
    """Configure structlog once per process; later calls are no-ops unless forced."""
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    use_console = settings.environment == "development" or settings.api.debug

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
        render_domain_values,
        *_renderer(use_console),
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
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
        force=force,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
