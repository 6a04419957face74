"""Permissions layer — OS permission oracle interface.

The oracle is whatever actually shows the system dialog.  It is consumed
through two calls:

  - ``request_permissions(permissions)`` — async; resolves once the user has
    answered, with one boolean per permission.  Missing entries count as
    denied.
  - ``current_status(permissions)`` — sync; what the platform already
    reports as granted, used to seed a controller without prompting.

``StaticPermissionOracle`` answers from a fixed decision map.  It backs
headless hosts and the test suite, and remembers what it granted so that a
later ``current_status`` sees earlier answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from sensify_permissions.logging import get_logger

log = get_logger(__name__)


class PermissionOracle(ABC):
    """Asynchronous source of per-permission grant decisions."""

    @abstractmethod
    async def request_permissions(
        self, permissions: Sequence[str]
    ) -> Mapping[str, bool]:
        """Prompt for *permissions* and return the user's per-permission answer."""

    def current_status(self, permissions: Sequence[str]) -> Mapping[str, bool]:
        """Return the platform's already-granted status without prompting.

        The base implementation reports nothing as granted.
        """
        return {}


class StaticPermissionOracle(PermissionOracle):
    """Oracle answering from a fixed decision map.

    Parameters
    ----------
    decisions:
        Permission → answer.  Permissions not listed get *default*.
    default:
        Answer for permissions missing from *decisions*.
    already_granted:
        Permissions the platform reports as granted before any dialog.
    """

    def __init__(
        self,
        decisions: Mapping[str, bool] | None = None,
        *,
        default: bool = False,
        already_granted: Sequence[str] = (),
    ) -> None:
        self._decisions = dict(decisions or {})
        self._default = default
        self._granted: set[str] = set(already_granted)
        self.calls: list[tuple[str, ...]] = []

    async def request_permissions(
        self, permissions: Sequence[str]
    ) -> Mapping[str, bool]:
        self.calls.append(tuple(permissions))
        result = {p: self._decisions.get(p, self._default) for p in permissions}
        self._granted.update(p for p, ok in result.items() if ok)
        log.debug("static_oracle_answered", result=result)
        return result

    def current_status(self, permissions: Sequence[str]) -> Mapping[str, bool]:
        return {p: p in self._granted for p in permissions}

    @property
    def call_count(self) -> int:
        return len(self.calls)
