"""
Structured logging for cache-spine.

The facade and the drivers log through structlog. Applications that already
configure structlog can skip :func:`configure_logging`; loggers returned by
:func:`get_logger` follow whatever configuration is active.

Events:
    ==========================  =======  ===================================
    ``cache_opened``            info     driver, prefix, serializer
    ``cache_closed``            info     driver
    ``cache_hit`` / ``_miss``   debug    key (physical)
    ``cache_*_failed``          warning  key, error (CacheError fields)
    ``<driver>_connected``      info     host, port
    ==========================  =======  ===================================

Examples:
    >>> from cache_spine.logging import configure_logging, log_context
    >>> configure_logging(level="DEBUG", json_format=False, service="orders-api")
    >>> with log_context(request_id="abc123"):
    ...     cache.get("user:42")  # cache_hit / cache_miss carry request_id

Tags:
    logging, structlog, observability, cache-spine
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .errors import CacheError

_service = "cache-spine"

# Scoped context: ``with log_context(request_id=...):``
log_context = structlog.contextvars.bound_contextvars


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", _service)
    return event_dict


def _expand_cache_errors(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace CacheError values with their category, retryable flag and context."""
    for name, value in event_dict.items():
        if isinstance(value, CacheError):
            event_dict[name] = value.to_dict()
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "cache-spine",
) -> None:
    """Route cache-spine logs through the standard library at *level*.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_format: True for JSON lines, False for console output,
            None to pick JSON when stdout is not a terminal
        service: Value of the ``service`` field on every event
    """
    global _service
    _service = service
    numeric_level = getattr(logging, level.upper())

    if json_format is None:
        json_format = not sys.stdout.isatty()
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _add_service,
            _expand_cache_errors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach *kwargs* to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
