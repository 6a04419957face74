"""Permissions layer — Mount scope.

``mount_permissions`` is the entry point a UI site uses.  Entering the scope
builds a :class:`PermissionStateController` for the request, attaches a
:class:`LifecycleBridge` when the host supplies a lifecycle, and schedules
the automatic trigger once in the background.  Leaving the scope disposes
the controller and detaches the bridge; a dialog still open at that point is
left to finish and its answer is discarded.

Usage::

    request = DEFAULT_REQUEST.for_purpose(PURPOSE_DETAIL).run_at_start(True)
    async with mount_permissions(request, oracle, on_result=render) as controller:
        ...
        if not controller.is_granted:
            await controller.request_manually()
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from contextvars import Token
from types import TracebackType

from sensify_permissions.config import Settings, get_settings
from sensify_permissions.events.bus import EventBus, build_event_bus
from sensify_permissions.lifecycle import Lifecycle, LifecycleBridge
from sensify_permissions.logging import bind_mount_context, clear_mount_context, get_logger
from sensify_permissions.permissions.controller import (
    PermissionStateController,
    ResultCallback,
)
from sensify_permissions.permissions.oracle import PermissionOracle
from sensify_permissions.permissions.request import PermissionRequest

log = get_logger(__name__)


class PermissionMount:
    """Async context manager owning one controller for one mount scope."""

    def __init__(
        self,
        request: PermissionRequest,
        oracle: PermissionOracle,
        on_result: ResultCallback | None = None,
        *,
        lifecycle: Lifecycle | None = None,
        bus: EventBus | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._request = request
        self._oracle = oracle
        self._on_result = on_result
        self._lifecycle = lifecycle
        self._bus = bus
        self._settings = settings
        self.mount_id = uuid.uuid4().hex[:12]
        self.controller: PermissionStateController | None = None
        self.bridge: LifecycleBridge | None = None
        self.activation: asyncio.Task[bool] | None = None
        self._context_token: Token[str | None] | None = None

    async def __aenter__(self) -> PermissionStateController:
        settings = self._settings or get_settings()
        bus = self._bus or build_event_bus(settings.events.log_file)
        self._context_token = bind_mount_context(self.mount_id)

        log.debug("permission_mount_entered", permissions=list(self._request.permissions()))

        try:
            self.controller = PermissionStateController(
                self._request,
                self._oracle,
                self._on_result,
                bus=bus,
                seed_from_platform=settings.permissions.seed_from_platform,
                pending_policy=settings.permissions.pending_policy,
            )
        except Exception:
            clear_mount_context(self._context_token)
            self._context_token = None
            raise

        if self._lifecycle is not None:
            self.bridge = LifecycleBridge(self._lifecycle, bus=bus)
            self.bridge.attach()

        if settings.permissions.auto_trigger:
            self.activation = asyncio.create_task(self.controller.activate())

        return self.controller

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self.controller is not None
        self.controller.dispose()

        if self.activation is not None:
            if not self.activation.done():
                self.activation.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self.activation
            elif not self.activation.cancelled() and self.activation.exception() is not None:
                log.warning(
                    "auto_trigger_failed",
                    error=str(self.activation.exception()),
                )

        if self.bridge is not None:
            self.bridge.detach()

        log.debug("permission_mount_exited", granted=self.controller.is_granted)
        clear_mount_context(self._context_token)
        self._context_token = None


def mount_permissions(
    request: PermissionRequest,
    oracle: PermissionOracle,
    on_result: ResultCallback | None = None,
    *,
    lifecycle: Lifecycle | None = None,
    bus: EventBus | None = None,
    settings: Settings | None = None,
) -> PermissionMount:
    """Return a mount scope for *request*; use with ``async with``."""
    return PermissionMount(
        request,
        oracle,
        on_result,
        lifecycle=lifecycle,
        bus=bus,
        settings=settings,
    )
