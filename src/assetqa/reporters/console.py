"""ConsoleReporter — live progress lines through the logger."""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

from assetqa.core.models import TestStatus
from assetqa.reporters.base import BaseReporter

if TYPE_CHECKING:
    from assetqa.core.models import TestOutcome

logger = logging.getLogger(__name__)

_MARKS = {
    TestStatus.PASSED: "PASS",
    TestStatus.FAILED: "FAIL",
    TestStatus.SKIPPED: "SKIP",
}


class ConsoleReporter(BaseReporter):
    """Running count of started/passed/failed/skipped tests."""

    def __init__(self) -> None:
        self.started = 0
        self.counts: dict[TestStatus, int] = dict.fromkeys(TestStatus, 0)

    @property
    def format_name(self) -> str:
        return "console"

    def create_test(self, module: str, feature: str, description: str) -> None:
        self.started += 1
        logger.info("[%d] %s > %s: %s", self.started, module, feature, description)

    def log_step(self, message: str) -> None:
        logger.info("      - %s", message)

    def log_step_with_screenshot(self, message: str, path: Path) -> None:
        logger.info("      - %s [%s]", message, path.name)

    def finish(self, outcome: TestOutcome) -> None:
        self.counts[outcome.status] += 1
        line = f"[{self.started}] {_MARKS[outcome.status]} {outcome.name} ({outcome.duration_ms:.0f}ms)"
        if outcome.failure_reason:
            line += f": {outcome.failure_reason}"
        if outcome.status == TestStatus.FAILED:
            logger.error(line)
        else:
            logger.info(line)

    def flush(self, output_dir: Path) -> Path:
        logger.info(
            "Totals: %d run, %d passed, %d failed, %d skipped",
            self.started,
            self.counts[TestStatus.PASSED],
            self.counts[TestStatus.FAILED],
            self.counts[TestStatus.SKIPPED],
        )
        return output_dir
