"""Shared fixtures: an in-memory session standing in for the device.

FakeSession keeps a flat list of FakeElements in tree order and answers
find_elements by evaluating the subset of iOS predicate syntax the screen
objects generate (==, CONTAINS, BEGINSWITH, IN, AND, OR, parentheses).
Taps run per-element callbacks so tests can script screen transitions.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from assetqa.core.models import BoundingBox, LocatorKind, LocatorSpec, ScrollDirection, WaitConfig
from assetqa.engine.base import BaseElement, BaseSession
from assetqa.engine.waiter import Waiter
from assetqa.screens.base import BaseScreen

# ── Command line ──


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("assetqa", "device scenarios")
    group.addoption(
        "--device",
        action="store_true",
        default=False,
        help="Run scenarios marked 'device' against the configured Appium server.",
    )
    group.addoption(
        "--assetqa-config",
        default=None,
        help="Config file for device scenarios (default: search from cwd).",
    )
    group.addoption(
        "--no-reset",
        dest="assetqa_no_reset",
        action="store_true",
        default=None,
        help="Keep app state between sessions for this run.",
    )
    group.addoption(
        "--reset",
        dest="assetqa_no_reset",
        action="store_false",
        help="Reset app state for every session in this run.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--device"):
        return
    skip_device = pytest.mark.skip(reason="device scenario: pass --device to run")
    for item in items:
        if "device" in item.keywords:
            item.add_marker(skip_device)


# ── Predicate evaluation ──

_TOKEN = re.compile(
    r"\s*(?:(?P<str>'(?:\\.|[^'\\])*')|(?P<num>\d+)|(?P<op>==|[(){},])|(?P<word>[A-Za-z_]\w*))"
)


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise ValueError(f"Cannot tokenize predicate at {pos}: {text!r}")
        kind = match.lastgroup
        assert kind is not None
        value = match.group(kind)
        if kind == "str":
            value = re.sub(r"\\(.)", r"\1", value[1:-1])
        tokens.append((kind, value))
        pos = match.end()
    return tokens


class Predicate:
    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self._pos = 0
        self.tree = self._or()
        if self._pos != len(self._tokens):
            raise ValueError(f"Trailing tokens in predicate: {text!r}")

    def _peek(self) -> tuple[str, str] | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> tuple[str, str]:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _or(self) -> Any:
        node = self._and()
        while self._peek() == ("word", "OR"):
            self._next()
            node = ("or", node, self._and())
        return node

    def _and(self) -> Any:
        node = self._atom()
        while self._peek() == ("word", "AND"):
            self._next()
            node = ("and", node, self._atom())
        return node

    def _atom(self) -> Any:
        if self._peek() == ("op", "("):
            self._next()
            node = self._or()
            assert self._next() == ("op", ")")
            return node
        _, attr = self._next()
        _, op = self._next()
        if op == "IN":
            assert self._next() == ("op", "{")
            values = set()
            while True:
                _, value = self._next()
                values.add(value)
                sep = self._next()
                if sep == ("op", "}"):
                    break
            return ("cmp", attr, "IN", values)
        _, value = self._next()
        return ("cmp", attr, op, value)

    def matches(self, element: FakeElement) -> bool:
        return self._eval(self.tree, element)

    def _eval(self, node: Any, element: FakeElement) -> bool:
        if node[0] == "or":
            return self._eval(node[1], element) or self._eval(node[2], element)
        if node[0] == "and":
            return self._eval(node[1], element) and self._eval(node[2], element)
        _, attr, op, expected = node
        actual = element.predicate_value(attr)
        if op == "==":
            return actual == expected
        if op == "CONTAINS":
            return expected in actual
        if op == "BEGINSWITH":
            return actual.startswith(expected)
        if op == "IN":
            return actual in expected
        raise ValueError(f"Unsupported operator {op}")


# ── Fake elements / session ──


class FakeElement(BaseElement):
    def __init__(
        self,
        session: FakeSession,
        element_type: str,
        *,
        name: str = "",
        label: str = "",
        value: str = "",
        placeholder: str = "",
        visible: bool = True,
        enabled: bool = True,
        container: str = "",
        offscreen: int = 0,
        y: int = 0,
        on_tap: Callable[[FakeElement], None] | None = None,
    ) -> None:
        self.session = session
        self.attrs: dict[str, str] = {
            "type": element_type,
            "name": name,
            "label": label,
            "value": value,
            "placeholderValue": placeholder,
            "selected": "false",
        }
        self.visible = visible
        self.enabled = enabled
        self.container = container
        self.offscreen = offscreen
        self.y = y
        self.on_tap = on_tap
        self.taps = 0
        self.typed: list[str] = []

    def __repr__(self) -> str:
        return f"<FakeElement {self.attrs['type']} name={self.attrs['name']!r} label={self.attrs['label']!r}>"

    def set(self, **attrs: str) -> None:
        self.attrs.update(attrs)

    def predicate_value(self, attr: str) -> str:
        if attr == "visible":
            return "1" if self.is_displayed() else "0"
        if attr == "enabled":
            return "1" if self.enabled else "0"
        return self.attrs.get(attr, "")

    def tap(self) -> None:
        assert self.is_displayed(), f"tapped hidden element {self!r}"
        self.taps += 1
        self.session.log.append(("tap", self.attrs["label"] or self.attrs["name"]))
        if self.on_tap is not None:
            self.on_tap(self)

    def type_text(self, text: str) -> None:
        self.typed.append(text)
        self.attrs["value"] = self.attrs["value"] + text

    def clear(self) -> None:
        self.attrs["value"] = ""

    def attribute(self, name: str) -> str | None:
        value = self.predicate_value(name)
        return value or None

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(x=0, y=self.y, width=100, height=40)

    def is_displayed(self) -> bool:
        return self.visible and self.offscreen <= self.session.scroll_position

    def is_enabled(self) -> bool:
        return self.enabled


class FakeSession(BaseSession):
    def __init__(self) -> None:
        self.elements: list[FakeElement] = []
        self.scroll_position = 0
        self.scrolls: list[ScrollDirection] = []
        self.keyboard_hidden = 0
        self.outside_taps = 0
        self.on_tap_outside: list[Callable[[], None]] = []
        self.alive = True
        self.log: list[tuple[str, str]] = []
        self.queries: list[LocatorSpec] = []

    # builders

    def add(self, element_type: str, **kwargs: Any) -> FakeElement:
        if not element_type.startswith("XCUIElementType"):
            element_type = f"XCUIElementType{element_type}"
        element = FakeElement(self, element_type, **kwargs)
        self.elements.append(element)
        return element

    def remove(self, element: FakeElement) -> None:
        self.elements.remove(element)

    def add_menu(
        self,
        opener: FakeElement,
        options: list[str],
        on_select: Callable[[str], None] | None = None,
        *,
        container: str = "XCUIElementTypeCollectionView",
    ) -> list[FakeElement]:
        """Hidden option buttons shown by tapping opener, hidden again by a
        selection or a tap outside."""
        buttons: list[FakeElement] = []

        def _hide() -> None:
            for b in buttons:
                b.visible = False

        def _select(button: FakeElement) -> None:
            _hide()
            if on_select is not None:
                on_select(button.attrs["label"])

        for option in options:
            buttons.append(
                self.add("Button", name=option, label=option, visible=False, container=container, on_tap=_select)
            )

        def _open(_: FakeElement) -> None:
            for b in buttons:
                b.visible = True

        opener.on_tap = _open
        self.on_tap_outside.append(_hide)
        return buttons

    def add_dropdown(self, caption: str, placeholder: str, options: list[str], value: str = "") -> FakeElement:
        """Form button whose value is set by choosing from its menu."""
        opener = self.add("Button", name=caption, label=value or placeholder, value=value)

        def _chosen(option: str) -> None:
            opener.set(value=option, label=option)

        self.add_menu(opener, options, _chosen)
        return opener

    def add_text(self, label: str, **kwargs: Any) -> FakeElement:
        return self.add("StaticText", name=label, label=label, **kwargs)

    def by_label(self, label: str) -> FakeElement:
        for element in self.elements:
            if label in (element.attrs["label"], element.attrs["name"]):
                return element
        raise LookupError(label)

    # BaseSession

    def find_elements(self, spec: LocatorSpec) -> list[BaseElement]:
        self.queries.append(spec)
        if spec.kind == LocatorKind.ACCESSIBILITY_ID:
            return [e for e in self.elements if e.attrs["name"] == spec.value]
        if spec.kind == LocatorKind.TEXT:
            return [
                e
                for e in self.elements
                if spec.value in (e.attrs["label"], e.attrs["name"], e.attrs["value"])
            ]
        if spec.kind == LocatorKind.CLASS_CHAIN:
            parts = [p for p in spec.value.split("/") if p and p != "**"]
            container, leaf = parts[0], parts[-1]
            return [e for e in self.elements if e.attrs["type"] == leaf and e.container == container]
        predicate = Predicate(spec.value)
        return [e for e in self.elements if predicate.matches(e)]

    def scroll(self, direction: ScrollDirection) -> None:
        self.scrolls.append(direction)
        if direction == ScrollDirection.DOWN:
            self.scroll_position += 1
        else:
            self.scroll_position = max(0, self.scroll_position - 1)

    def hide_keyboard(self) -> None:
        self.keyboard_hidden += 1

    def tap_outside(self) -> None:
        self.outside_taps += 1
        for hook in list(self.on_tap_outside):
            hook()

    def screenshot(self) -> bytes:
        return b"\x89PNG\r\n\x1a\nfake"

    def is_alive(self) -> bool:
        return self.alive

    def quit(self) -> None:
        self.alive = False


class FakeClock:
    """Deterministic monotonic clock; sleep() just advances it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# ── Fixtures ──


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def waits() -> WaitConfig:
    return WaitConfig(timeout_ms=1000, poll_interval_ms=50, short_timeout_ms=200, max_scroll_attempts=3)


@pytest.fixture
def waiter(waits: WaitConfig, clock: FakeClock) -> Waiter:
    return Waiter(waits.timeout_ms, waits.poll_interval_ms, clock=clock, sleep=clock.sleep)


@pytest.fixture
def make_screen(
    session: FakeSession, waits: WaitConfig, waiter: Waiter
) -> Iterator[Callable[[type[BaseScreen]], Any]]:
    """Build a screen object bound to the fake session and clock."""

    def _make(screen_cls: type[BaseScreen]) -> Any:
        return screen_cls(session, waits, waiter)

    yield _make
