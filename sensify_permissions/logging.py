"""Sensify Permissions — Structured logging configuration.

Uses structlog for structured, levelled logging with consistent key names
across the package.  All log entries include:
    - timestamp (ISO-8601)
    - level
    - module (Python logger name)
    - mount_id (bound via a context variable while a mount scope is active)
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, WrappedLogger

if TYPE_CHECKING:
    from sensify_permissions.config import Settings

_ctx_mount_id: ContextVar[str | None] = ContextVar("mount_id", default=None)


def bind_mount_context(mount_id: str | None) -> Token[str | None]:
    """Bind the active mount scope to the current async task.

    Returns the token to pass to :func:`clear_mount_context` so that leaving a
    nested scope restores the enclosing scope's id.
    """
    return _ctx_mount_id.set(mount_id)


def clear_mount_context(token: Token[str | None] | None = None) -> None:
    if token is None:
        _ctx_mount_id.set(None)
    else:
        _ctx_mount_id.reset(token)


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


def _inject_context_vars(
    _logger: WrappedLogger, _method: str, event_dict: EventDict
) -> EventDict:
    """Add ContextVar values to every log record."""
    if (mount_id := _ctx_mount_id.get()) is not None:
        event_dict["mount_id"] = mount_id
    return event_dict


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure_logging(
    level: str = "info",
    format: str = "console",
    log_file: str | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Call once at host startup, before any permission scope is mounted.

    Args:
        level:    One of debug, info, warning, error, critical.
        format:   ``"console"`` for human-readable output, ``"json"`` for
                  machine-readable structured logs.
        log_file: Optional path to write logs to in addition to stdout.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _inject_context_vars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(level.upper())

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_from_settings(settings: Settings) -> None:
    """Apply the ``logging`` block of *settings* via :func:`configure_logging`."""
    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
        log_file=str(settings.logging.file) if settings.logging.file else None,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger for *name*.

    Usage::

        log = get_logger(__name__)
        log.info("permission_result", granted=True, permission_count=4)
    """
    return structlog.get_logger(name)
