"""Tests for SessionPool: session reuse and release across test classes."""

from __future__ import annotations

from typing import Any

import pytest

from assetqa.core.models import AppiumConfig, Config
from assetqa.runner import pool as pool_module
from assetqa.runner.policy import SessionPolicy
from assetqa.runner.pool import SessionPool


class _Handle:
    def __init__(self, number: int, appium: AppiumConfig) -> None:
        self.number = number
        self.no_reset = appium.no_reset
        self.alive = True
        self.released = 0

    def is_alive(self) -> bool:
        return self.alive


class _Device:
    """Stands in for the Appium server: counts opened and live sessions."""

    def __init__(self) -> None:
        self.opened: list[_Handle] = []
        self.logins: list[_Handle] = []
        self.login_error: Exception | None = None

    @property
    def live(self) -> list[_Handle]:
        return [h for h in self.opened if h.released == 0]

    def acquire(self, appium: AppiumConfig) -> _Handle:
        handle = _Handle(len(self.opened) + 1, appium)
        self.opened.append(handle)
        return handle

    def login(self, session: _Handle, credentials: Any, waits: Any = None) -> None:
        if self.login_error is not None:
            raise self.login_error
        self.logins.append(session)

    def release(self, session: _Handle, *, terminate: bool = True) -> None:
        session.released += 1
        session.alive = False


@pytest.fixture
def device(monkeypatch: pytest.MonkeyPatch) -> _Device:
    fake = _Device()
    monkeypatch.setattr(pool_module, "acquire_session", fake.acquire)
    monkeypatch.setattr(pool_module, "login", fake.login)
    monkeypatch.setattr(pool_module, "release_session", fake.release)
    return fake


def _pool(default_no_reset: bool = False) -> SessionPool:
    config = Config(appium=AppiumConfig(bundle_id="com.example.assets"))
    return SessionPool(config, SessionPolicy(default_no_reset=default_no_reset))


# ── No-reset sharing ──


class TestSharedSession:
    def test_reused_across_classes(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True) as first:
            pass
        with pool.lease(no_reset=True) as second:
            pass
        assert first is second
        assert len(device.opened) == 1
        assert len(device.logins) == 1
        assert first.released == 0

    def test_opened_with_no_reset(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True) as session:
            assert session.no_reset is True

    def test_dead_shared_session_reopened(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True) as first:
            first.alive = False
        with pool.lease(no_reset=True) as second:
            pass
        assert second is not first
        assert first.released == 1
        assert device.live == [second]

    def test_close_releases_shared(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True) as session:
            pass
        pool.close()
        pool.close()
        assert session.released == 1
        assert pool.shared is None


# ── Reset classes ──


class TestResetSession:
    def test_released_at_end_of_lease(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=False) as session:
            assert session.no_reset is False
            assert session.released == 0
        assert session.released == 1
        assert device.live == []

    def test_each_class_gets_a_fresh_session(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=False) as first:
            pass
        with pool.lease(no_reset=False) as second:
            pass
        assert first is not second
        assert len(device.logins) == 2

    def test_reset_after_no_reset_closes_shared(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True) as shared:
            pass
        with pool.lease(no_reset=False) as fresh:
            assert shared.released == 1
            assert device.live == [fresh]
        assert pool.shared is None
        assert device.live == []

    def test_no_reset_after_reset_opens_new_shared(self, device: _Device) -> None:
        pool = _pool()
        with pool.lease(no_reset=True):
            pass
        with pool.lease(no_reset=False):
            pass
        with pool.lease(no_reset=True) as shared:
            assert len(device.live) == 1
        assert len(device.opened) == 3
        assert pool.shared is shared


# ── Policy ──


class TestPolicy:
    def test_default_used_without_override(self, device: _Device) -> None:
        pool = _pool(default_no_reset=True)
        with pool.lease() as session:
            assert session.no_reset is True
        assert session.released == 0

    def test_restored_after_lease(self, device: _Device) -> None:
        pool = _pool(default_no_reset=False)
        with pool.lease(no_reset=True):
            assert pool.policy.no_reset is True
        assert pool.policy.no_reset is False
        assert pool.policy.overridden is False

    def test_restored_when_class_fails(self, device: _Device) -> None:
        pool = _pool(default_no_reset=False)
        with pytest.raises(RuntimeError):
            with pool.lease(no_reset=True):
                raise RuntimeError("boom")
        assert pool.policy.no_reset is False


# ── Login ──


class TestLogin:
    def test_failed_login_releases_session(self, device: _Device) -> None:
        device.login_error = RuntimeError("login screen missing")
        pool = _pool()
        with pytest.raises(RuntimeError, match="login screen missing"):
            with pool.lease(no_reset=True):
                pass
        assert device.opened[0].released == 1
        assert pool.shared is None
        assert pool.policy.no_reset is False
