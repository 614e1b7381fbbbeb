"""Structured logging for stepbind.

structlog events and records from plain stdlib loggers share one stderr
handler, so logs never mix with a report written to stdout. Two renderers
are available:

- key=value console lines (default)
- one JSON object per line (``STEPBIND_LOG_FORMAT=json``), for CI runs

Usage:
    from stepbind.logging import configure_logging, get_logger

    configure_logging()

    log = get_logger(__name__).bind(handler="i_have_apples")
    log.debug("step_passed", duration_ns=1200)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "use_library_defaults",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "STEPBIND_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "STEPBIND_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.WARNING


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    return logging.getLevelNamesMapping().get(name, DEFAULT_LOG_LEVEL)


def _json_requested() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _pre_chain() -> list[Processor]:
    """Enrichment applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(use_json: bool) -> list[Processor]:
    if use_json:
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call repeatedly; every call replaces the previous handler.

    Args:
        force_json: Render JSON regardless of STEPBIND_LOG_FORMAT.
        level: Log level. If None, read from STEPBIND_LOG_LEVEL (default
            WARNING).
    """
    use_json = force_json or _json_requested()
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(use_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(log_level)


def use_library_defaults() -> None:
    """Route structlog events through stdlib logging without adding handlers.

    Applied on import when nothing else has configured structlog. Events then
    obey the stdlib logger levels and handlers, so an embedding application
    that never calls configure_logging only sees warnings on stderr.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, normally ``get_logger(__name__)``."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind key-value pairs included in every following log event.

    Example:
        bind_context(feature="eating.feature", scenario="eat 5 out of 12")
        log.info("step_started")  # carries feature and scenario
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


if not structlog.is_configured():
    use_library_defaults()
