"""MarkdownReporter — Markdown + JSON report of a test run."""

from __future__ import annotations

import json
import os
from pathlib import Path  # noqa: TC003

from assetqa.core.exceptions import ReporterError
from assetqa.core.models import SuiteSummary, TestOutcome, TestStatus
from assetqa.reporters.base import BaseReporter


class MarkdownReporter(BaseReporter):
    """Collect outcomes and write report.md + summary.json on flush."""

    def __init__(self) -> None:
        self.outcomes: list[TestOutcome] = []

    @property
    def format_name(self) -> str:
        """Report format name."""
        return "markdown"

    def finish(self, outcome: TestOutcome) -> None:
        self.outcomes.append(outcome)

    def summary(self) -> SuiteSummary:
        def count(status: TestStatus) -> int:
            return sum(1 for o in self.outcomes if o.status == status)

        return SuiteSummary(
            total=len(self.outcomes),
            passed=count(TestStatus.PASSED),
            failed=count(TestStatus.FAILED),
            skipped=count(TestStatus.SKIPPED),
            duration_ms=sum(o.duration_ms for o in self.outcomes),
            outcomes=list(self.outcomes),
        )

    def flush(self, output_dir: Path) -> Path:
        """Generate report files in output_dir.

        Creates:
            - report.md  (human-readable)
            - summary.json (machine-readable)

        Returns:
            Path to report.md.

        Raises:
            ReporterError: If the files cannot be written.
        """
        summary = self.summary()
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            report_path = output_dir / "report.md"
            summary_path = output_dir / "summary.json"

            report_path.write_text(self._render(summary, output_dir), encoding="utf-8")
            summary_path.write_text(
                json.dumps(self._build_summary(summary), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as exc:
            msg = f"Report generation failed: {exc}"
            raise ReporterError(msg) from exc
        return report_path

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def _render(self, summary: SuiteSummary, output_dir: Path) -> str:
        timestamp = summary.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        lines = [
            "# Assets Test Report",
            "",
            f"**Timestamp:** {timestamp}",
            f"**Duration:** {summary.duration_ms:.0f}ms",
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Total | {summary.total} |",
            f"| Passed | {summary.passed} |",
            f"| Failed | {summary.failed} |",
            f"| Skipped | {summary.skipped} |",
            "",
            "## Tests",
            "",
            "| Module | Feature | Test | Status | Duration |",
            "|--------|---------|------|--------|----------|",
        ]
        for outcome in summary.outcomes:
            lines.append(
                f"| {outcome.module} | {outcome.feature} | {_cell(outcome.name)} "
                f"| {outcome.status.value.upper()} | {outcome.duration_ms:.0f}ms |"
            )
        lines.append("")

        for outcome in summary.outcomes:
            lines.extend(self._render_outcome(outcome, output_dir))
        return "\n".join(lines)

    def _render_outcome(self, outcome: TestOutcome, output_dir: Path) -> list[str]:
        lines = [f"### {outcome.name}", "", f"**Status:** {outcome.status.value.upper()}"]
        if outcome.failure_reason:
            lines.append(f"**Failure:** {outcome.failure_reason}")
        lines.append("")
        if outcome.steps:
            lines.append("| Step | Description | Screenshot |")
            lines.append("|------|-------------|------------|")
            for step in outcome.steps:
                link = ""
                if step.screenshot:
                    link = f"[view]({_relative(step.screenshot, output_dir)})"
                lines.append(f"| {step.index} | {_cell(step.message)} | {link} |")
            lines.append("")
        step_shots = {step.screenshot for step in outcome.steps}
        failure_shots = [s for s in outcome.screenshots if s not in step_shots]
        for shot in failure_shots:
            lines.append(f"![failure]({_relative(shot, output_dir)})")
        if failure_shots:
            lines.append("")
        return lines

    # ------------------------------------------------------------------
    # Summary JSON builder
    # ------------------------------------------------------------------

    def _build_summary(self, summary: SuiteSummary) -> dict[str, object]:
        """Build machine-readable summary dict."""
        return {
            "total": summary.total,
            "passed": summary.passed,
            "failed": summary.failed,
            "skipped": summary.skipped,
            "duration_ms": summary.duration_ms,
            "timestamp": summary.timestamp.isoformat(),
            "tests": [
                {
                    "name": o.name,
                    "module": o.module,
                    "feature": o.feature,
                    "status": o.status.value,
                    "failure_reason": o.failure_reason,
                    "duration_ms": o.duration_ms,
                    "steps": len(o.steps),
                    "screenshots": o.screenshots,
                }
                for o in summary.outcomes
            ],
        }


def _cell(text: str) -> str:
    """Escape a value for a Markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def _relative(path: str, base: Path) -> str:
    try:
        return os.path.relpath(path, base)
    except ValueError:
        return path
