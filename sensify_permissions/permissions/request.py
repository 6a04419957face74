"""Permissions layer — Composable permission requests.

A ``PermissionRequest`` says which purposes a UI site needs and whether the
dialog should open automatically when the site becomes active.  Requests are
immutable values; every combinator returns a new request::

    request = (
        DEFAULT_REQUEST
        .for_purpose(PURPOSE_DETAIL)
        .for_purpose(PURPOSE_SENSOR_STEP_COUNTER)
        .run_at_start(True)
    )
    request.permissions()   # deduplicated union of both purposes
    request.should_run_at_start()  # True

Composition rules for ``a.then(b)``:
  - purposes: a's purposes, then b's purposes not already present
  - trigger:  b's trigger when b sets one, otherwise a's (last write wins)

Both rules are associative, so a chain built in any grouping yields the same
purposes, permissions and trigger.

Only the canonical ``DEFAULT_REQUEST`` treats an unset trigger as
"ask at start".  ``for_purpose`` steps carry an explicit MANUAL trigger, so a
chain asks at start only when ``run_at_start(True)`` comes after its last
``for_purpose`` step.

Resolution uses the registry of the left-hand request: ``a.then(b)`` looks
b's purposes up in a's registry and b's own registry is not consulted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sensify_permissions.permissions.models import TriggerPolicy
from sensify_permissions.permissions.registry import PurposeRegistry, default_registry


@dataclass(frozen=True)
class PermissionRequest:
    """Purposes plus a trigger policy.  Permissions are derived on demand."""

    purposes: tuple[int, ...] = ()
    trigger: TriggerPolicy = TriggerPolicy.UNSET
    canonical: bool = False
    registry: PurposeRegistry = field(
        default=default_registry, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "purposes", tuple(dict.fromkeys(self.purposes)))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def permissions(self) -> tuple[str, ...]:
        """Deduplicated union of the registry rows for every purpose."""
        resolved: dict[str, None] = {}
        for purpose in self.purposes:
            resolved.update(dict.fromkeys(self.registry.lookup(purpose)))
        return tuple(resolved)

    def trigger_policy(self) -> TriggerPolicy:
        return self.trigger

    def should_run_at_start(self) -> bool:
        if self.trigger is TriggerPolicy.UNSET:
            return self.canonical
        return self.trigger is TriggerPolicy.AT_START

    def is_empty(self) -> bool:
        return not self.purposes and self.trigger is TriggerPolicy.UNSET

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def then(self, other: PermissionRequest) -> PermissionRequest:
        """Compose *other* after this request.

        The result keeps this request's registry; *other*'s purposes are
        resolved against it when ``permissions()`` is called.
        """
        if other.is_empty():
            return self
        trigger = self.trigger if other.trigger is TriggerPolicy.UNSET else other.trigger
        return PermissionRequest(
            purposes=self.purposes + other.purposes,
            trigger=trigger,
            registry=self.registry,
        )

    def for_purpose(self, purpose: int) -> PermissionRequest:
        return self.then(
            PermissionRequest(
                purposes=(purpose,),
                trigger=TriggerPolicy.MANUAL,
                registry=self.registry,
            )
        )

    def run_at_start(self, should_run: bool) -> PermissionRequest:
        trigger = TriggerPolicy.AT_START if should_run else TriggerPolicy.MANUAL
        return self.then(PermissionRequest(trigger=trigger, registry=self.registry))


DEFAULT_REQUEST = PermissionRequest(canonical=True)
