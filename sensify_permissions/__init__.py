"""Sensify Permissions — Declarative, composable OS permission requests.

A client declares *why* it needs permissions (purposes) and *when* to ask
(trigger policy); the package resolves the permission set, drives the OS
dialog through an asynchronous oracle and exposes the verdict as state bound
to a UI mount scope.

Layers (bottom to top):
    1. Registry   — fixed purpose → permission table
    2. Requests   — immutable, composable ``PermissionRequest`` values
    3. Controller — ``PermissionStateController`` bridging the dialog to state
    4. Mount      — ``mount_permissions`` scope wiring controller + lifecycle
"""

__version__ = "0.1.0"
__author__ = "Sensify Contributors"
__license__ = "Apache-2.0"

from sensify_permissions.permissions import (
    DEFAULT_REQUEST,
    PURPOSE_DETAIL,
    PURPOSE_SENSOR_STEP_COUNTER,
    Permission,
    PermissionRequest,
    PermissionStateController,
    Purpose,
    mount_permissions,
)

__all__ = [
    "__version__",
    "DEFAULT_REQUEST",
    "PURPOSE_DETAIL",
    "PURPOSE_SENSOR_STEP_COUNTER",
    "Permission",
    "PermissionRequest",
    "PermissionStateController",
    "Purpose",
    "mount_permissions",
]
