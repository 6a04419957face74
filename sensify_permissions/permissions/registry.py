"""Permissions layer — Purpose → permission registry.

The registry is fixed configuration data.  Adding a purpose means adding a
``Purpose`` member and a row to ``PURPOSE_PERMISSIONS``; there is no runtime
registration API.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from sensify_permissions.permissions.models import Permission, Purpose

PURPOSE_PERMISSIONS: Mapping[Purpose, tuple[str, ...]] = MappingProxyType(
    {
        Purpose.DETAIL: (
            Permission.CAMERA,
            Permission.HIGH_SAMPLING_RATE_SENSORS,
            Permission.MANAGE_MEDIA,
            Permission.WRITE_EXTERNAL_STORAGE,
        ),
        Purpose.SENSOR_STEP_COUNTER: (Permission.ACTIVITY_RECOGNITION,),
    }
)


class PurposeRegistry:
    """Read-only lookup from a purpose to the permissions it needs.

    Unknown purposes are not an error: they resolve to an empty tuple.
    """

    def __init__(self, table: Mapping[Purpose, tuple[str, ...]] | None = None) -> None:
        source = PURPOSE_PERMISSIONS if table is None else table
        self._table: Mapping[int, tuple[str, ...]] = MappingProxyType(
            {purpose: tuple(dict.fromkeys(perms)) for purpose, perms in source.items()}
        )

    def lookup(self, purpose: int) -> tuple[str, ...]:
        return self._table.get(purpose, ())

    def purposes(self) -> tuple[int, ...]:
        return tuple(self._table)

    def __contains__(self, purpose: object) -> bool:
        return purpose in self._table

    def __len__(self) -> int:
        return len(self._table)


default_registry = PurposeRegistry()
