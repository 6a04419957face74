"""Permissions layer — Purposes, permission identifiers, trigger policies.

Defines the request model's core types:
  - ``Purpose``        — closed enumeration of feature-level reasons
  - ``Permission``     — well-known OS permission identifiers (string constants)
  - ``TriggerPolicy``  — AT_START / MANUAL / UNSET
  - ``ControllerState``— IDLE / PENDING / DISPOSED

Purpose values are stable integers so that hosts which still pass raw IDs
(``101``) resolve to the same registry rows as ``Purpose.DETAIL``.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Purpose(IntEnum):
    """Feature-level reasons a client needs permissions."""

    DETAIL = 101
    SENSOR_STEP_COUNTER = 201


PURPOSE_DETAIL = Purpose.DETAIL
PURPOSE_SENSOR_STEP_COUNTER = Purpose.SENSOR_STEP_COUNTER


class TriggerPolicy(str, Enum):
    """When a request should be shown to the user."""

    AT_START = "at_start"
    MANUAL = "manual"
    UNSET = "unset"


class ControllerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    DISPOSED = "disposed"


class Permission:
    """Well-known permission identifiers.

    These are plain string constants, **not** an enum, because the oracle
    speaks the platform's own identifiers and custom registries may add any
    string the platform understands.
    """

    CAMERA = "android.permission.CAMERA"
    HIGH_SAMPLING_RATE_SENSORS = "android.permission.HIGH_SAMPLING_RATE_SENSORS"
    MANAGE_MEDIA = "android.permission.MANAGE_MEDIA"
    WRITE_EXTERNAL_STORAGE = "android.permission.WRITE_EXTERNAL_STORAGE"
    ACTIVITY_RECOGNITION = "android.permission.ACTIVITY_RECOGNITION"
