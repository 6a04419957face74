"""Permissions layer — purpose registry, composable requests, state controller, mount scope."""

from sensify_permissions.permissions.controller import PermissionStateController
from sensify_permissions.permissions.models import (
    PURPOSE_DETAIL,
    PURPOSE_SENSOR_STEP_COUNTER,
    ControllerState,
    Permission,
    Purpose,
    TriggerPolicy,
)
from sensify_permissions.permissions.mount import PermissionMount, mount_permissions
from sensify_permissions.permissions.oracle import PermissionOracle, StaticPermissionOracle
from sensify_permissions.permissions.registry import (
    PURPOSE_PERMISSIONS,
    PurposeRegistry,
    default_registry,
)
from sensify_permissions.permissions.request import DEFAULT_REQUEST, PermissionRequest

__all__ = [
    # Identifiers
    "Purpose",
    "PURPOSE_DETAIL",
    "PURPOSE_SENSOR_STEP_COUNTER",
    "Permission",
    "TriggerPolicy",
    "ControllerState",
    # Registry
    "PURPOSE_PERMISSIONS",
    "PurposeRegistry",
    "default_registry",
    # Requests
    "PermissionRequest",
    "DEFAULT_REQUEST",
    # Oracle
    "PermissionOracle",
    "StaticPermissionOracle",
    # State
    "PermissionStateController",
    "PermissionMount",
    "mount_permissions",
]
