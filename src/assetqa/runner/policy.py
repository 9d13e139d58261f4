"""SessionPolicy — per-class override of the app reset flag."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetqa.core.models import AppiumConfig

logger = logging.getLogger(__name__)


class SessionPolicy:
    """Holds the effective no_reset flag.

    A test class may opt into no-reset for speed; restore() puts the
    configured default back so later classes are unaffected.
    """

    def __init__(self, default_no_reset: bool = False) -> None:
        self._default = default_no_reset
        self._current = default_no_reset

    @property
    def no_reset(self) -> bool:
        return self._current

    @property
    def default(self) -> bool:
        return self._default

    @property
    def overridden(self) -> bool:
        return self._current != self._default

    def override(self, no_reset: bool) -> None:
        logger.debug("Session policy: no_reset %s -> %s", self._current, no_reset)
        self._current = no_reset

    def restore(self) -> None:
        if self.overridden:
            logger.debug("Session policy restored to no_reset=%s", self._default)
        self._current = self._default

    @contextmanager
    def scoped(self, no_reset: bool = True) -> Iterator[SessionPolicy]:
        """Apply an override for the duration of the block."""
        self.override(no_reset)
        try:
            yield self
        finally:
            self.restore()

    def apply(self, appium: AppiumConfig) -> AppiumConfig:
        """Copy of appium with the effective reset flags."""
        update = {"no_reset": self._current}
        if self._current:
            update["full_reset"] = False
        return appium.model_copy(update=update)
