"""Sensify Permissions — Exception hierarchy.

All exceptions raised by the package inherit from SensifyError so that
callers can catch the full family with a single except clause when needed.

Denied permissions are never reported through exceptions: a denial is data
(``is_granted`` is False and the raw per-permission map says which ones).

Hierarchy:
    SensifyError
    └── PermissionRequestError
        └── RequestPendingError
"""

from __future__ import annotations

from typing import Any


class SensifyError(Exception):
    """Base exception for all Sensify Permissions errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


class PermissionRequestError(SensifyError):
    """Base for misuse of a permission state controller."""


class RequestPendingError(PermissionRequestError):
    """A permission dialog is already in flight and the controller rejects overlaps."""

    def __init__(self, permissions: list[str]) -> None:
        super().__init__(
            "A permission request is already pending for "
            f"{len(permissions)} permission(s)",
            context={"permissions": permissions},
        )
        self.permissions = permissions
