"""Tests for ABC interfaces — verify contracts and prevent direct instantiation."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from assetqa.core.models import BoundingBox, LocatorSpec, ScrollDirection, TestOutcome
from assetqa.engine.base import BaseElement, BaseSession
from assetqa.reporters.base import BaseReporter

# ── BaseSession ──


class TestBaseSession:
    def test_cannot_instantiate(self) -> None:
        with pytest.raises(TypeError, match="abstract method"):
            BaseSession()  # type: ignore[abstract]

    def test_has_all_abstract_methods(self) -> None:
        expected = {
            "find_elements",
            "scroll",
            "hide_keyboard",
            "tap_outside",
            "screenshot",
            "is_alive",
            "quit",
        }
        assert expected == BaseSession.__abstractmethods__

    def test_save_screenshot(self, tmp_path: Path) -> None:
        class DummySession(BaseSession):
            def find_elements(self, spec: LocatorSpec) -> list[BaseElement]:
                return []

            def scroll(self, direction: ScrollDirection) -> None: ...
            def hide_keyboard(self) -> None: ...
            def tap_outside(self) -> None: ...
            def screenshot(self) -> bytes:
                return b"png"

            def is_alive(self) -> bool:
                return True

            def quit(self) -> None: ...

        path = DummySession().save_screenshot(tmp_path / "shots" / "a.png")
        assert path.read_bytes() == b"png"


# ── BaseElement ──


class TestBaseElement:
    def test_has_all_abstract_methods(self) -> None:
        expected = {
            "tap",
            "type_text",
            "clear",
            "attribute",
            "bounding_box",
            "is_displayed",
            "is_enabled",
        }
        assert expected == BaseElement.__abstractmethods__

    def test_label_falls_back_to_name(self) -> None:
        class DummyElement(BaseElement):
            def __init__(self, attrs: dict[str, str]) -> None:
                self.attrs = attrs

            def tap(self) -> None: ...
            def type_text(self, text: str) -> None: ...
            def clear(self) -> None: ...
            def attribute(self, name: str) -> str | None:
                return self.attrs.get(name)

            def bounding_box(self) -> BoundingBox:
                return BoundingBox()

            def is_displayed(self) -> bool:
                return True

            def is_enabled(self) -> bool:
                return True

        element = DummyElement({"name": "plus", "type": "XCUIElementTypeButton"})
        assert element.label == "plus"
        assert element.value == ""
        assert element.element_type == "XCUIElementTypeButton"


# ── BaseReporter ──


class TestBaseReporter:
    def test_cannot_instantiate(self) -> None:
        with pytest.raises(TypeError, match="abstract method"):
            BaseReporter()  # type: ignore[abstract]

    def test_has_all_abstract_methods(self) -> None:
        assert {"finish", "flush", "format_name"} == BaseReporter.__abstractmethods__

    def test_optional_hooks_are_noops(self, tmp_path: Path) -> None:
        class DummyReporter(BaseReporter):
            @property
            def format_name(self) -> str:
                return "dummy"

            def finish(self, outcome: TestOutcome) -> None: ...
            def flush(self, output_dir: Path) -> Path:
                return output_dir

        reporter = DummyReporter()
        reporter.create_test("Assets", "Edit", "changes class")
        reporter.log_step("step")
        reporter.log_step_with_screenshot("step", tmp_path / "x.png")
        assert reporter.flush(tmp_path) == tmp_path
