"""StepLog — append-only record of what a test case did."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from assetqa.core.models import StepLogEntry

logger = logging.getLogger(__name__)


class StepLog:
    """Ordered step entries for one test invocation.

    Entries can only be appended. finalize() freezes the log once the
    outcome is known; later appends raise RuntimeError.
    """

    def __init__(self, test_name: str = "") -> None:
        self._test_name = test_name
        self._entries: list[StepLogEntry] = []
        self._frozen = False

    def add(self, message: str, screenshot: str | None = None) -> StepLogEntry:
        if self._frozen:
            msg = f"Step log for {self._test_name or 'test'} is finalized"
            raise RuntimeError(msg)
        entry = StepLogEntry(index=len(self._entries) + 1, message=message, screenshot=screenshot)
        self._entries.append(entry)
        logger.info("[%s] step %d: %s", self._test_name, entry.index, message)
        return entry

    def finalize(self) -> list[StepLogEntry]:
        self._frozen = True
        return list(self._entries)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> tuple[StepLogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StepLogEntry]:
        return iter(tuple(self._entries))
