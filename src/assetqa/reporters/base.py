"""BaseReporter ABC — test result reporting interface.

MarkdownReporter and ConsoleReporter implement this; MultiReporter fans
out to several.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetqa.core.models import TestOutcome


class BaseReporter(ABC):
    """Receives test lifecycle events and writes the final report."""

    def create_test(self, module: str, feature: str, description: str) -> None:
        """A test case started."""

    def log_step(self, message: str) -> None:
        """A step was recorded for the running test."""

    def log_step_with_screenshot(self, message: str, path: Path) -> None:
        """A step was recorded together with a screenshot."""

    @abstractmethod
    def finish(self, outcome: TestOutcome) -> None:
        """The running test ended with outcome."""
        ...

    @abstractmethod
    def flush(self, output_dir: Path) -> Path:
        """Write everything collected so far.

        Args:
            output_dir: Output directory for the report.

        Returns:
            Path to the main report file (or the directory).
        """
        ...

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Report format name: 'markdown', 'console'."""
        ...


class MultiReporter(BaseReporter):
    """Forward every event to each wrapped reporter in order."""

    def __init__(self, reporters: list[BaseReporter]) -> None:
        self._reporters = list(reporters)

    @property
    def format_name(self) -> str:
        return "+".join(r.format_name for r in self._reporters)

    def create_test(self, module: str, feature: str, description: str) -> None:
        for reporter in self._reporters:
            reporter.create_test(module, feature, description)

    def log_step(self, message: str) -> None:
        for reporter in self._reporters:
            reporter.log_step(message)

    def log_step_with_screenshot(self, message: str, path: Path) -> None:
        for reporter in self._reporters:
            reporter.log_step_with_screenshot(message, path)

    def finish(self, outcome: TestOutcome) -> None:
        for reporter in self._reporters:
            reporter.finish(outcome)

    def flush(self, output_dir: Path) -> Path:
        """Flush all; returns the first reporter's path."""
        paths = [reporter.flush(output_dir) for reporter in self._reporters]
        return paths[0] if paths else output_dir
