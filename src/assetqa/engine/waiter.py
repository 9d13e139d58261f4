"""Waiter — pause until a condition holds or a timeout elapses.

Replaces fixed-duration sleeps. The predicate is checked before the first
sleep (an already-true condition costs no time) and once more after the
final sleep, so the deadline itself is never skipped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from assetqa.core.exceptions import TimeoutExceeded

logger = logging.getLogger(__name__)


class Waiter:
    """Condition poller.

    clock and sleep are injectable so the timing contract can be tested
    without wall-clock delays.
    """

    def __init__(
        self,
        timeout_ms: int = 10000,
        poll_interval_ms: int = 250,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if poll_interval_ms <= 0:
            msg = f"poll_interval_ms must be positive, got {poll_interval_ms}"
            raise ValueError(msg)
        self._timeout_ms = timeout_ms
        self._poll_interval = poll_interval_ms / 1000
        self._clock = clock
        self._sleep = sleep

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def until(
        self,
        predicate: Callable[[], bool],
        *,
        timeout_ms: int | None = None,
        description: str = "condition",
    ) -> None:
        """Block until predicate() is true.

        Args:
            predicate: Zero-argument condition. Exceptions it raises propagate.
            timeout_ms: Overrides the default timeout for this call.
            description: Used in the TimeoutExceeded message.

        Raises:
            TimeoutExceeded: If the predicate is still false at the deadline.
        """
        limit_ms = self._timeout_ms if timeout_ms is None else timeout_ms
        deadline = self._clock() + limit_ms / 1000

        while True:
            if predicate():
                return
            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            self._sleep(min(self._poll_interval, remaining))

        logger.debug("Timed out after %dms: %s", limit_ms, description)
        raise TimeoutExceeded(description, limit_ms)

    def holds(
        self,
        predicate: Callable[[], bool],
        *,
        timeout_ms: int | None = None,
        description: str = "condition",
    ) -> bool:
        """Like until(), but a timeout is reported as False."""
        try:
            self.until(predicate, timeout_ms=timeout_ms, description=description)
        except TimeoutExceeded:
            return False
        return True
