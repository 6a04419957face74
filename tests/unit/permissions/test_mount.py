"""Unit tests — mount_permissions scope."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from sensify_permissions.config import Settings
from sensify_permissions.lifecycle import Lifecycle, LifecycleEvent
from sensify_permissions.logging import _ctx_mount_id
from sensify_permissions.permissions.models import (
    PURPOSE_DETAIL,
    PURPOSE_SENSOR_STEP_COUNTER,
    ControllerState,
    Permission,
)
from sensify_permissions.permissions.mount import PermissionMount, mount_permissions
from sensify_permissions.permissions.oracle import StaticPermissionOracle
from sensify_permissions.permissions.request import DEFAULT_REQUEST

STEP_AT_START = DEFAULT_REQUEST.for_purpose(PURPOSE_SENSOR_STEP_COUNTER).run_at_start(True)
DETAIL_MANUAL = DEFAULT_REQUEST.for_purpose(PURPOSE_DETAIL)


def _settings(**permissions: object) -> Settings:
    return Settings(permissions=permissions)


@pytest.mark.unit
class TestMountAutoTrigger:
    async def test_at_start_request_asks_on_enter(self, gated_oracle) -> None:
        on_result = MagicMock()
        mount = mount_permissions(STEP_AT_START, gated_oracle, on_result, settings=_settings())
        assert isinstance(mount, PermissionMount)

        async with mount as controller:
            await gated_oracle.wait_for_call()
            assert controller.state is ControllerState.PENDING
            gated_oracle.answer({Permission.ACTIVITY_RECOGNITION: True})
            assert await mount.activation is True
            assert controller.is_granted is True

        on_result.assert_called_once_with(True)
        assert controller.state is ControllerState.DISPOSED

    async def test_enter_does_not_block_on_dialog(self, gated_oracle) -> None:
        async with mount_permissions(STEP_AT_START, gated_oracle, settings=_settings()) as controller:
            assert controller.is_granted is False
            assert gated_oracle.pending == 0

    async def test_manual_request_does_not_ask(self, drain) -> None:
        oracle = StaticPermissionOracle(default=True)
        async with mount_permissions(DETAIL_MANUAL, oracle, settings=_settings()) as controller:
            await drain()
            assert oracle.call_count == 0
            assert await controller.request_manually() is True
        assert oracle.call_count == 1

    async def test_auto_trigger_disabled_by_settings(self, drain) -> None:
        oracle = StaticPermissionOracle(default=True)
        mount = mount_permissions(
            STEP_AT_START, oracle, settings=_settings(auto_trigger=False)
        )
        async with mount:
            await drain()
        assert mount.activation is None
        assert oracle.call_count == 0

    async def test_remount_with_seeding_skips_prompt(self, drain) -> None:
        oracle = StaticPermissionOracle(default=True)
        settings = _settings(seed_from_platform=True)

        async with mount_permissions(STEP_AT_START, oracle, settings=settings) as first:
            await drain()
            assert first.is_granted is True

        async with mount_permissions(STEP_AT_START, oracle, settings=settings) as second:
            await drain()
            assert second.is_granted is True

        assert oracle.call_count == 1

    async def test_settings_default_to_global(self, test_settings, drain) -> None:
        oracle = StaticPermissionOracle(default=True)
        async with mount_permissions(STEP_AT_START, oracle) as controller:
            await drain()
            assert controller.is_granted is True


@pytest.mark.unit
class TestMountTeardown:
    async def test_unmount_while_pending_discards_result(self, gated_oracle, drain) -> None:
        on_result = MagicMock()
        mount = mount_permissions(STEP_AT_START, gated_oracle, on_result, settings=_settings())

        async with mount as controller:
            await gated_oracle.wait_for_call()

        assert mount.activation.cancelled()
        gated_oracle.answer({Permission.ACTIVITY_RECOGNITION: True})
        await drain()

        assert controller.is_granted is False
        assert controller.last_result is None
        on_result.assert_not_called()

    async def test_lifecycle_bridge_lives_for_the_scope(self) -> None:
        lifecycle = Lifecycle()
        oracle = StaticPermissionOracle(default=True)
        mount = mount_permissions(
            DETAIL_MANUAL, oracle, lifecycle=lifecycle, settings=_settings()
        )

        async with mount as controller:
            assert lifecycle.observer_count == 1
            lifecycle.dispatch(LifecycleEvent.STARTED)
            lifecycle.dispatch(LifecycleEvent.STOPPED)
            assert controller.is_granted is False

        assert lifecycle.observer_count == 0
        assert mount.bridge.transitions == [LifecycleEvent.STARTED, LifecycleEvent.STOPPED]

        lifecycle.dispatch(LifecycleEvent.STARTED)
        assert len(mount.bridge.transitions) == 2

    async def test_lifecycle_events_do_not_trigger_requests(self, drain) -> None:
        lifecycle = Lifecycle()
        oracle = StaticPermissionOracle(default=True)
        async with mount_permissions(
            DETAIL_MANUAL, oracle, lifecycle=lifecycle, settings=_settings()
        ):
            lifecycle.dispatch(LifecycleEvent.STOPPED)
            lifecycle.dispatch(LifecycleEvent.STARTED)
            await drain()
        assert oracle.call_count == 0

    async def test_body_exception_propagates_and_disposes(self) -> None:
        oracle = StaticPermissionOracle(default=True)
        mount = mount_permissions(DETAIL_MANUAL, oracle, settings=_settings())
        with pytest.raises(ValueError):
            async with mount:
                raise ValueError("render failed")
        assert mount.controller.is_disposed is True


@pytest.mark.unit
class TestMountContext:
    async def test_mount_id_bound_inside_scope(self) -> None:
        oracle = StaticPermissionOracle(default=True)
        mount = mount_permissions(DETAIL_MANUAL, oracle, settings=_settings())
        async with mount:
            assert _ctx_mount_id.get() == mount.mount_id
        assert _ctx_mount_id.get() is None

    async def test_nested_exit_restores_outer_mount_id(self) -> None:
        oracle = StaticPermissionOracle(default=True)
        outer = mount_permissions(DETAIL_MANUAL, oracle, settings=_settings())
        inner = mount_permissions(DETAIL_MANUAL, oracle, settings=_settings())

        async with outer:
            async with inner:
                assert _ctx_mount_id.get() == inner.mount_id
            assert _ctx_mount_id.get() == outer.mount_id
        assert _ctx_mount_id.get() is None

    async def test_failed_enter_unbinds_mount_id(self) -> None:
        oracle = StaticPermissionOracle(default=True)
        mount = mount_permissions(
            STEP_AT_START, oracle, settings=_settings(seed_from_platform=True)
        )
        with patch.object(oracle, "current_status", side_effect=RuntimeError("no platform")):
            with pytest.raises(RuntimeError, match="no platform"):
                async with mount:
                    pass
        assert _ctx_mount_id.get() is None
        assert mount.activation is None
