"""SessionPool — signed-in sessions handed out per the reset policy."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from assetqa.engine.appium import acquire_session, release_session
from assetqa.screens.login import login

if TYPE_CHECKING:
    from assetqa.core.models import AppiumConfig, Config
    from assetqa.engine.base import BaseSession
    from assetqa.runner.policy import SessionPolicy

logger = logging.getLogger(__name__)


class SessionPool:
    """Hands out sessions according to the effective reset policy.

    While no-reset is in effect one session is shared and reused. A reset
    checkout closes the shared session first, so at most one session is
    live on the device at a time.
    """

    def __init__(self, config: Config, policy: SessionPolicy) -> None:
        self._config = config
        self._policy = policy
        self._shared: BaseSession | None = None

    @property
    def policy(self) -> SessionPolicy:
        return self._policy

    @property
    def shared(self) -> BaseSession | None:
        return self._shared

    def checkout(self) -> tuple[BaseSession, bool]:
        """Return (session, shared). Shared sessions outlive the caller."""
        appium = self._policy.apply(self._config.appium)
        if not appium.no_reset:
            self.close()
            return self._open(appium), False
        if self._shared is not None and not self._shared.is_alive():
            logger.warning("Shared session died; opening a new one")
            self.close()
        if self._shared is None:
            self._shared = self._open(appium)
        return self._shared, True

    @contextmanager
    def lease(self, no_reset: bool | None = None) -> Iterator[BaseSession]:
        """Session for one block; None keeps the current policy.

        The policy is restored and a non-shared session released on exit.
        """
        wanted = self._policy.no_reset if no_reset is None else no_reset
        with self._policy.scoped(no_reset=wanted):
            session, shared = self.checkout()
            try:
                yield session
            finally:
                if not shared:
                    release_session(session)

    def close(self) -> None:
        if self._shared is not None:
            release_session(self._shared)
            self._shared = None

    def _open(self, appium: AppiumConfig) -> BaseSession:
        logger.info("Opening session (no_reset=%s)", appium.no_reset)
        session = acquire_session(appium)
        try:
            login(session, self._config.credentials, self._config.waits)
        except Exception:
            release_session(session)
            raise
        return session
