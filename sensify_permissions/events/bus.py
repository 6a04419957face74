"""Event streaming infrastructure — EventBus protocol and implementations.

Permission controllers and lifecycle bridges publish what happens to them
(dialog started, verdict delivered, result discarded after unmount, host
visibility changes) as plain dicts on a topic.  Consumers such as an NDJSON
audit file or a host diagnostics screen subscribe by choosing a backend:

  - NullEventBus   → default (no-op, zero overhead)
  - LogEventBus    → NDJSON append-only file
  - FanoutEventBus → broadcast to several backends at once

Standard topic names:
  TOPIC_PERMISSIONS = "sensify.permissions" — request / verdict events
  TOPIC_LIFECYCLE   = "sensify.lifecycle"   — host visibility transitions
"""

from __future__ import annotations

import asyncio
import json
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from sensify_permissions.logging import get_logger

log = get_logger(__name__)

TOPIC_PERMISSIONS = "sensify.permissions"
TOPIC_LIFECYCLE = "sensify.lifecycle"


# ---------------------------------------------------------------------------
# Abstract interface
# ---------------------------------------------------------------------------


class EventBus(ABC):
    """Abstract event bus.  All implementations must be safe for concurrent async use.

    An event is a plain dict.  The bus adds a ``_topic`` key and a
    ``_timestamp`` (Unix epoch float) before forwarding to the backend.
    """

    @abstractmethod
    async def emit(self, topic: str, event: dict[str, Any]) -> None:
        """Publish *event* to *topic*.

        This method must not raise — failures are logged and swallowed so that
        a backend outage never propagates into the permission flow.
        """

    def emit_sync(self, topic: str, event: dict[str, Any]) -> None:
        """Synchronous variant for callers outside a coroutine.

        Backends without a synchronous path drop the event.
        """

    def _stamp(self, topic: str, event: dict[str, Any]) -> dict[str, Any]:
        """Add metadata fields to *event* in-place and return it."""
        event.setdefault("_topic", topic)
        event.setdefault("_timestamp", time.time())
        return event


# ---------------------------------------------------------------------------
# NullEventBus — default, zero overhead
# ---------------------------------------------------------------------------


class NullEventBus(EventBus):
    """Discards all events.  Used when no event file is configured."""

    async def emit(self, topic: str, event: dict[str, Any]) -> None:
        pass


# ---------------------------------------------------------------------------
# LogEventBus — NDJSON file
# ---------------------------------------------------------------------------


class LogEventBus(EventBus):
    """Writes events as NDJSON to a file — one line per event, append-only.

    Usage::

        bus = LogEventBus(Path("~/.sensify/events.ndjson"))
        await bus.emit(TOPIC_PERMISSIONS, {"event": "permission_request_started"})
    """

    def __init__(self, log_file: Path | None = None) -> None:
        self._file = log_file.expanduser() if log_file else None
        self._lock = asyncio.Lock()

    async def emit(self, topic: str, event: dict[str, Any]) -> None:
        self._stamp(topic, event)
        log.debug("event_bus_emit", topic=topic, event_type=event.get("event"))
        if self._file is None:
            return
        line = json.dumps(event, default=str) + "\n"
        async with self._lock:
            self._append(topic, line)

    def emit_sync(self, topic: str, event: dict[str, Any]) -> None:
        self._stamp(topic, event)
        if self._file is None:
            return
        self._append(topic, json.dumps(event, default=str) + "\n")

    def _append(self, topic: str, line: str) -> None:
        assert self._file is not None
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            with self._file.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as exc:
            log.error("event_bus_write_failed", topic=topic, error=str(exc))


# ---------------------------------------------------------------------------
# FanoutEventBus — broadcast to multiple backends simultaneously
# ---------------------------------------------------------------------------


class FanoutEventBus(EventBus):
    """Routes each event to multiple EventBus backends in parallel.

    Usage::

        bus = FanoutEventBus([
            LogEventBus(Path("~/.sensify/events.ndjson")),
            diagnostics_bus,
        ])
    """

    def __init__(self, backends: list[EventBus]) -> None:
        self._backends = backends

    async def emit(self, topic: str, event: dict[str, Any]) -> None:
        self._stamp(topic, event)
        await asyncio.gather(
            *(b.emit(topic, dict(event)) for b in self._backends),
            return_exceptions=True,
        )

    def emit_sync(self, topic: str, event: dict[str, Any]) -> None:
        self._stamp(topic, event)
        for backend in self._backends:
            try:
                backend.emit_sync(topic, dict(event))
            except Exception as exc:  # noqa: BLE001
                log.error(
                    "event_bus_fanout_failed",
                    topic=topic,
                    backend=type(backend).__name__,
                    error=str(exc),
                )


def build_event_bus(log_file: Path | None) -> EventBus:
    """Return the bus matching the ``events`` settings block."""
    if log_file is None:
        return NullEventBus()
    return LogEventBus(log_file)
