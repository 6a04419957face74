"""Event streaming layer — EventBus infrastructure.

Quick start::

    from sensify_permissions.events import LogEventBus, TOPIC_PERMISSIONS

    bus = LogEventBus(Path("~/.sensify/events.ndjson"))
    await bus.emit(TOPIC_PERMISSIONS, {"event": "permission_request_started"})
"""

from sensify_permissions.events.bus import (
    TOPIC_LIFECYCLE,
    TOPIC_PERMISSIONS,
    EventBus,
    FanoutEventBus,
    LogEventBus,
    NullEventBus,
    build_event_bus,
)

__all__ = [
    # Interface
    "EventBus",
    # Implementations
    "NullEventBus",
    "LogEventBus",
    "FanoutEventBus",
    "build_event_bus",
    # Topic constants
    "TOPIC_PERMISSIONS",
    "TOPIC_LIFECYCLE",
]
