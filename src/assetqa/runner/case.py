"""TestCaseRunner — scope one scenario: report, step log, failure capture, cleanup."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

import pytest

from assetqa.core.models import TestOutcome, TestStatus
from assetqa.runner.steps import StepLog

if TYPE_CHECKING:
    from assetqa.engine.base import BaseSession
    from assetqa.reporters.base import BaseReporter
    from assetqa.runner.screenshots import ScreenshotStore

logger = logging.getLogger(__name__)


class CaseContext:
    """Handle given to a test body while its case is open."""

    def __init__(
        self,
        name: str,
        session: BaseSession,
        steps: StepLog,
        reporter: BaseReporter,
        screenshots: ScreenshotStore,
    ) -> None:
        self.name = name
        self.session = session
        self._steps = steps
        self._reporter = reporter
        self._screenshots = screenshots
        self.captured: list[Path] = []

    def step(self, message: str) -> None:
        self._steps.add(message)
        self._reporter.log_step(message)

    def checkpoint(self, message: str) -> Path:
        """Record a step together with a screenshot of the current screen."""
        path = self._screenshots.save(self.session, f"{self.name}_{len(self._steps) + 1}")
        self.captured.append(path)
        self._steps.add(message, screenshot=str(path))
        self._reporter.log_step_with_screenshot(message, path)
        return path

    def check(self, condition: object, message: str) -> None:
        """Assert condition, recording the check in the step log.

        Raises:
            AssertionError: With message, when condition is falsy.
        """
        if not condition:
            self.step(f"Check failed: {message}")
            raise AssertionError(message)
        self.step(f"Verified: {message}")


class TestCaseRunner:
    """Runs test bodies inside case() and collects their outcomes."""

    __test__ = False

    def __init__(
        self,
        session_provider: Callable[[], BaseSession],
        reporter: BaseReporter,
        screenshots: ScreenshotStore,
    ) -> None:
        self._session_provider = session_provider
        self._reporter = reporter
        self._screenshots = screenshots
        self.outcomes: list[TestOutcome] = []

    @property
    def reporter(self) -> BaseReporter:
        return self._reporter

    @contextmanager
    def case(
        self,
        module: str,
        feature: str,
        description: str,
        cleanup: Callable[[], object] | None = None,
    ) -> Iterator[CaseContext]:
        """Open a test case.

        On every exit path the cleanup navigation runs exactly once and the
        outcome is handed to the reporter. A failure also captures a
        screenshot, and the original exception propagates to the caller.
        """
        session = self._session_provider()
        self._reporter.create_test(module, feature, description)
        steps = StepLog(description)
        ctx = CaseContext(description, session, steps, self._reporter, self._screenshots)

        logger.info("START %s / %s: %s", module, feature, description)
        start = time.monotonic()
        status = TestStatus.PASSED
        reason: str | None = None
        try:
            yield ctx
        except Exception as e:
            status = TestStatus.FAILED
            reason = f"{type(e).__name__}: {e}"
            logger.exception("FAILED %s", description)
            self._capture_failure(ctx)
            raise
        except pytest.skip.Exception as e:
            status = TestStatus.SKIPPED
            reason = str(e) or type(e).__name__
            raise
        except BaseException as e:
            # pytest.fail() and interrupts
            status = TestStatus.FAILED
            reason = f"{type(e).__name__}: {e}"
            logger.error("FAILED %s: %s", description, reason)
            self._capture_failure(ctx)
            raise
        finally:
            self._run_cleanup(cleanup, steps)
            outcome = TestOutcome(
                name=description,
                module=module,
                feature=feature,
                status=status,
                failure_reason=reason,
                duration_ms=(time.monotonic() - start) * 1000,
                screenshots=[str(p) for p in ctx.captured],
                steps=steps.finalize(),
            )
            self.outcomes.append(outcome)
            self._reporter.finish(outcome)
            logger.info("%s %s (%.0fms)", status.value.upper(), description, outcome.duration_ms)

    def _capture_failure(self, ctx: CaseContext) -> None:
        if not ctx.session.is_alive():
            logger.warning("Session is gone; no failure screenshot for %s", ctx.name)
            return
        try:
            ctx.captured.append(self._screenshots.save(ctx.session, f"{ctx.name}_failure"))
        except Exception:
            # The test failure is what gets reported.
            logger.warning("Failure screenshot not captured for %s", ctx.name, exc_info=True)

    def _run_cleanup(self, cleanup: Callable[[], object] | None, steps: StepLog) -> None:
        if cleanup is None:
            return
        try:
            cleanup()
        except Exception as e:
            logger.exception("Cleanup failed")
            steps.add(f"Cleanup failed: {type(e).__name__}: {e}")
