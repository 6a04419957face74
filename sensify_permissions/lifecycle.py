"""Host lifecycle — visibility events and the bridge that observes them.

The host UI reports when a screen becomes visible (``STARTED``) or hidden
(``STOPPED``) through a :class:`Lifecycle`.  A :class:`LifecycleBridge` is
attached for the lifetime of one permission mount scope and records those
transitions for diagnostics.

The bridge is observation only.  It never gates, delays or suppresses a
permission request; hosts wanting "only auto-ask while visible" layer that
policy themselves on top of ``PermissionStateController.activate()``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from sensify_permissions.events.bus import TOPIC_LIFECYCLE, EventBus, NullEventBus
from sensify_permissions.logging import get_logger

log = get_logger(__name__)


class LifecycleEvent(str, Enum):
    STARTED = "started"
    STOPPED = "stopped"


LifecycleObserver = Callable[[LifecycleEvent], None]


class Lifecycle:
    """Observable visibility state of a host screen.

    Hosts with their own lifecycle machinery subclass this and call
    ``dispatch()`` from their callbacks; simple hosts use it directly.
    """

    def __init__(self) -> None:
        self._observers: list[LifecycleObserver] = []
        self.current: LifecycleEvent | None = None

    def add_observer(self, observer: LifecycleObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: LifecycleObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def dispatch(self, event: LifecycleEvent) -> None:
        self.current = event
        for observer in list(self._observers):
            observer(event)

    @property
    def observer_count(self) -> int:
        return len(self._observers)


class LifecycleBridge:
    """Subscribes to a :class:`Lifecycle` and records visibility transitions."""

    def __init__(
        self,
        lifecycle: Lifecycle,
        *,
        name: str = "permissions",
        bus: EventBus | None = None,
    ) -> None:
        self._lifecycle = lifecycle
        self._name = name
        self._bus = bus or NullEventBus()
        self._attached = False
        self.transitions: list[LifecycleEvent] = []

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        if self._attached:
            return
        self._lifecycle.add_observer(self._on_event)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self._lifecycle.remove_observer(self._on_event)
        self._attached = False

    def _on_event(self, event: LifecycleEvent) -> None:
        self.transitions.append(event)
        log.debug("lifecycle_transition", owner=self._name, transition=event.value)
        self._bus.emit_sync(
            TOPIC_LIFECYCLE,
            {"event": f"lifecycle_{event.value}", "owner": self._name},
        )
