"""Permissions layer — PermissionStateController.

Bridges a one-shot asynchronous permission dialog into state that can be
read synchronously at any time:

  - ``is_granted``  — True iff the last completed dialog granted everything
  - ``last_result`` — raw per-permission answer of the last completed dialog
  - ``state``       — IDLE / PENDING / DISPOSED

Usage::

    controller = PermissionStateController(request, oracle, on_result=render)
    await controller.activate()          # auto-asks for AT_START requests
    granted = await controller.request_manually()

At most one oracle call is in flight per controller.  A second
``request_manually()`` while one is pending either awaits the same dialog
(``pending_policy="coalesce"``) or raises :class:`RequestPendingError`
(``pending_policy="reject"``).

After ``dispose()`` the controller is inert: a dialog that answers later is
discarded without touching ``is_granted``/``last_result`` or calling
``on_result``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Callable, Literal

from sensify_permissions.events.bus import TOPIC_PERMISSIONS, EventBus, NullEventBus
from sensify_permissions.exceptions import RequestPendingError
from sensify_permissions.logging import get_logger
from sensify_permissions.permissions.models import ControllerState
from sensify_permissions.permissions.oracle import PermissionOracle
from sensify_permissions.permissions.request import PermissionRequest

log = get_logger(__name__)

ResultCallback = Callable[[bool], None]
PendingPolicy = Literal["coalesce", "reject"]


class PermissionStateController:
    """Live grant state for one resolved :class:`PermissionRequest`.

    Parameters
    ----------
    request:
        The request whose permissions are asked for.
    oracle:
        The OS permission dialog.
    on_result:
        Called with the all-granted verdict once per completed dialog.
    bus:
        EventBus receiving request/verdict events.  Defaults to NullEventBus.
    seed_from_platform:
        When ``True``, ``is_granted`` starts from ``oracle.current_status``
        instead of ``False``.
    pending_policy:
        Behaviour of overlapping ``request_manually()`` calls.
    """

    def __init__(
        self,
        request: PermissionRequest,
        oracle: PermissionOracle,
        on_result: ResultCallback | None = None,
        *,
        bus: EventBus | None = None,
        seed_from_platform: bool = False,
        pending_policy: PendingPolicy = "coalesce",
    ) -> None:
        self._request = request
        self._oracle = oracle
        self._on_result = on_result
        self._bus = bus or NullEventBus()
        self._pending_policy = pending_policy
        self._is_granted = False
        self._last_result: dict[str, bool] | None = None
        self._inflight: asyncio.Task[bool] | None = None
        self._disposed = False

        if seed_from_platform:
            self._seed_from_platform()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def request(self) -> PermissionRequest:
        return self._request

    @property
    def is_granted(self) -> bool:
        return self._is_granted

    @property
    def last_result(self) -> Mapping[str, bool] | None:
        if self._last_result is None:
            return None
        return MappingProxyType(self._last_result)

    @property
    def state(self) -> ControllerState:
        if self._disposed:
            return ControllerState.DISPOSED
        if self._inflight is not None:
            return ControllerState.PENDING
        return ControllerState.IDLE

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    async def request_manually(self) -> bool:
        """Show the dialog for every permission of the request.

        Returns the all-granted verdict.  Suspends until the oracle answers.
        """
        if self._disposed:
            log.debug("permission_request_ignored", reason="disposed")
            return self._is_granted

        if self._inflight is not None:
            if self._pending_policy == "reject":
                raise RequestPendingError(list(self._request.permissions()))
            log.debug("permission_request_coalesced")
            return await asyncio.shield(self._inflight)

        permissions = self._request.permissions()
        if not permissions:
            # Nothing to ask for: vacuously granted.
            return await self._complete({})

        self._inflight = asyncio.ensure_future(self._ask(permissions))
        self._inflight.add_done_callback(self._log_failure)
        return await asyncio.shield(self._inflight)

    async def activate(self) -> bool:
        """On-activate hook: run the automatic trigger at most once.

        Returns ``True`` when a request was issued.  Nothing is asked when the
        request is manual or the permissions are already granted.
        """
        if self._disposed or self._is_granted or not self._request.should_run_at_start():
            log.debug(
                "auto_trigger_skipped",
                granted=self._is_granted,
                run_at_start=self._request.should_run_at_start(),
                disposed=self._disposed,
            )
            return False
        log.debug("auto_trigger_fired")
        await self.request_manually()
        return True

    def dispose(self) -> None:
        """Detach from the mount scope.  Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        log.debug("permission_controller_disposed", pending=self._inflight is not None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _seed_from_platform(self) -> None:
        permissions = self._request.permissions()
        status = self._oracle.current_status(permissions)
        self._is_granted = all(status.get(p, False) for p in permissions)
        log.debug("permission_state_seeded", granted=self._is_granted)

    async def _ask(self, permissions: Sequence[str]) -> bool:
        log.info("permission_request_started", permissions=list(permissions))
        await self._emit("permission_request_started", permissions=list(permissions))
        try:
            raw = await self._oracle.request_permissions(permissions)
        finally:
            self._inflight = None

        if self._disposed:
            log.info("permission_result_discarded", permissions=list(permissions))
            await self._emit("permission_result_discarded", permissions=list(permissions))
            return self._is_granted

        return await self._complete({p: bool(raw.get(p, False)) for p in permissions})

    async def _complete(self, result: dict[str, bool]) -> bool:
        self._last_result = result
        self._is_granted = all(result.values())
        log.info(
            "permission_result",
            granted=self._is_granted,
            denied=[p for p, ok in result.items() if not ok],
        )
        if self._on_result is not None:
            self._on_result(self._is_granted)
        await self._emit(
            "permission_request_completed",
            granted=self._is_granted,
            result=dict(result),
        )
        return self._is_granted

    async def _emit(self, event_type: str, **data: Any) -> None:
        await self._bus.emit(TOPIC_PERMISSIONS, {"event": event_type, **data})

    @staticmethod
    def _log_failure(task: asyncio.Task[bool]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("permission_request_failed", error=str(exc), error_type=type(exc).__name__)
