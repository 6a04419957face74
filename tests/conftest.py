"""Shared pytest fixtures for the sensify-permissions test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Mapping, Sequence

import pytest

import sensify_permissions.config as cfg_module
from sensify_permissions.config import Settings, override_settings
from sensify_permissions.permissions.oracle import PermissionOracle


class GatedOracle(PermissionOracle):
    """Oracle whose answers are released by the test, one dialog at a time."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._waiters: list[asyncio.Future[Mapping[str, bool]]] = []
        self._granted: set[str] = set()

    def mark_granted(self, *permissions: str) -> None:
        self._granted.update(permissions)

    async def request_permissions(
        self, permissions: Sequence[str]
    ) -> Mapping[str, bool]:
        self.calls.append(tuple(permissions))
        waiter: asyncio.Future[Mapping[str, bool]] = (
            asyncio.get_running_loop().create_future()
        )
        self._waiters.append(waiter)
        return await waiter

    def current_status(self, permissions: Sequence[str]) -> Mapping[str, bool]:
        return {p: p in self._granted for p in permissions}

    async def wait_for_call(self) -> None:
        while not self._waiters:
            await asyncio.sleep(0)

    def answer(self, result: Mapping[str, bool]) -> None:
        self._waiters.pop(0).set_result(result)

    def fail(self, exc: BaseException) -> None:
        self._waiters.pop(0).set_exception(exc)

    @property
    def pending(self) -> int:
        return len(self._waiters)


async def _drain_loop(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Iterator[Settings]:
    original = cfg_module._settings
    settings = Settings(logging={"level": "debug", "format": "console"})
    override_settings(settings)
    yield settings
    cfg_module._settings = original


@pytest.fixture
def gated_oracle() -> GatedOracle:
    return GatedOracle()


@pytest.fixture
def drain():
    """Let already-scheduled tasks run to completion."""
    return _drain_loop
