"""BaseScreen — shared behaviour for all screen objects.

A screen object borrows the session, never owns it. Every public operation
that navigates confirms arrival at the next screen's signature element
before returning; probes (is_*) never raise for absence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar, TypeVar

from assetqa.core.exceptions import (
    ElementNotInteractable,
    FieldNotEditable,
    OptionNotFound,
    ScreenNotReached,
    TimeoutExceeded,
)
from assetqa.core.models import LocatorSpec, ScrollDirection, WaitConfig
from assetqa.engine.locator import LocatorResolver, label_predicate, quote_predicate
from assetqa.engine.waiter import Waiter

if TYPE_CHECKING:
    from assetqa.engine.base import BaseElement, BaseSession

logger = logging.getLogger(__name__)

ScreenT = TypeVar("ScreenT", bound="BaseScreen")

EDITABLE_TYPES: frozenset[str] = frozenset(
    {
        "XCUIElementTypeTextField",
        "XCUIElementTypeSecureTextField",
        "XCUIElementTypeTextView",
        "XCUIElementTypeSearchField",
    }
)

# Options of an open menu/picker sheet.
MENU_OPTIONS = LocatorSpec.class_chain(
    "**/XCUIElementTypeCollectionView/**/XCUIElementTypeButton", visible_only=True
)


class Dropdown:
    """A form button that opens a list of options.

    Located by its caption (accessibility name) or its placeholder text.
    The selection is read from the value attribute, falling back to a label
    that is neither caption nor placeholder.
    """

    def __init__(self, caption: str, placeholder: str) -> None:
        self.caption = caption
        self.placeholder = placeholder

    @property
    def locator(self) -> LocatorSpec:
        caption = quote_predicate(self.caption)
        placeholder = quote_predicate(self.placeholder)
        return LocatorSpec.predicate(
            "type == 'XCUIElementTypeButton' AND "
            f"(name == {caption} OR label == {placeholder})"
        )

    def read(self, element: BaseElement) -> str:
        value = element.value
        if value and value != self.placeholder:
            return value
        label = element.label
        if label in (self.caption, self.placeholder):
            return ""
        return label


class BaseScreen:
    """Screen object base class."""

    name: ClassVar[str] = "screen"
    signature: ClassVar[LocatorSpec]

    def __init__(
        self,
        session: BaseSession,
        waits: WaitConfig | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self._session = session
        self._waits = waits or WaitConfig()
        self._waiter = waiter or Waiter(
            timeout_ms=self._waits.timeout_ms,
            poll_interval_ms=self._waits.poll_interval_ms,
        )
        self._resolver = LocatorResolver(session)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    # ------------------------------------------------------------------
    # Screen identity
    # ------------------------------------------------------------------

    def is_displayed(self, timeout_ms: int | None = None) -> bool:
        """Whether the signature element shows up within a short timeout."""
        limit = self._waits.short_timeout_ms if timeout_ms is None else timeout_ms
        return self._waiter.holds(
            lambda: self._visible(self.signature),
            timeout_ms=limit,
            description=f"{self.name} displayed",
        )

    def wait_until_displayed(self: ScreenT, timeout_ms: int | None = None) -> ScreenT:
        """Block until this screen's signature is visible.

        Raises:
            ScreenNotReached: If the signature never appears.
        """
        try:
            self._waiter.until(
                lambda: self._visible(self.signature),
                timeout_ms=timeout_ms,
                description=f"{self.name} signature {self.signature.describe()}",
            )
        except TimeoutExceeded as e:
            raise ScreenNotReached(self.name, str(e)) from e
        logger.debug("On %s", self.name)
        return self

    def _screen(self, screen_cls: type[ScreenT]) -> ScreenT:
        """Build another screen sharing this session and wait policy."""
        return screen_cls(self._session, self._waits, self._waiter)

    def _navigate(self, action: Callable[[], None], target: type[ScreenT]) -> ScreenT:
        """Run action, then confirm arrival at target."""
        action()
        return self._screen(target).wait_until_displayed()

    def _leave_to(self, action: Callable[[], None], target: type[ScreenT]) -> ScreenT:
        """Like _navigate, for modal forms: this screen must also disappear.

        Raises:
            ScreenNotReached: If this screen is still showing (the app kept
                the form open) or target never appears.
        """
        action()
        if not self._waiter.holds(
            lambda: not self._visible(self.signature), description=f"{self.name} closed"
        ):
            raise ScreenNotReached(target.name, f"{self.name} still displayed")
        return self._screen(target).wait_until_displayed()

    # ------------------------------------------------------------------
    # Element helpers
    # ------------------------------------------------------------------

    def _find(self, spec: LocatorSpec) -> BaseElement | None:
        return self._resolver.first(spec)

    def _find_all(self, spec: LocatorSpec) -> list[BaseElement]:
        return self._resolver.resolve(spec)

    def _exists(self, spec: LocatorSpec) -> bool:
        return self._resolver.exists(spec)

    def _visible(self, spec: LocatorSpec) -> bool:
        return any(el.is_displayed() for el in self._resolver.resolve(spec))

    def _probe(self, spec: LocatorSpec, timeout_ms: int | None = None) -> bool:
        """Short wait for spec to be visible; False on timeout."""
        limit = self._waits.short_timeout_ms if timeout_ms is None else timeout_ms
        return self._waiter.holds(
            lambda: self._visible(spec), timeout_ms=limit, description=spec.describe()
        )

    def _wait_for(self, spec: LocatorSpec, timeout_ms: int | None = None) -> BaseElement:
        """Wait until a visible element matches spec and return it.

        Raises:
            TimeoutExceeded: If nothing visible matches in time.
        """
        found: list[BaseElement] = []

        def _present() -> bool:
            found[:] = [el for el in self._resolver.resolve(spec) if el.is_displayed()]
            return bool(found)

        self._waiter.until(_present, timeout_ms=timeout_ms, description=spec.describe())
        return found[0]

    def _value_of(self, spec: LocatorSpec) -> str:
        element = self._find(spec)
        if element is None:
            return ""
        return element.value or element.label

    def _click(self, spec: LocatorSpec, timeout_ms: int | None = None) -> None:
        """Tap once the control is present, visible and enabled.

        Raises:
            ElementNotInteractable: After timeout.
        """
        target: list[BaseElement] = []

        def _ready() -> bool:
            for el in self._resolver.resolve(spec):
                if el.is_displayed() and el.is_enabled():
                    target[:] = [el]
                    return True
            return False

        try:
            self._waiter.until(_ready, timeout_ms=timeout_ms, description=f"tap {spec.describe()}")
        except TimeoutExceeded as e:
            msg = f"{self.name}: control not interactable: {spec.describe()}"
            raise ElementNotInteractable(msg) from e
        logger.debug("%s: tap %s", self.name, spec.describe())
        target[0].tap()

    def _settled_count(self, spec: LocatorSpec) -> int:
        """Number of matches once two consecutive polls agree."""
        previous: int | None = None

        def _stable() -> bool:
            nonlocal previous
            current = len(self._resolver.resolve(spec))
            stable = current == previous
            previous = current
            return stable

        self._waiter.holds(_stable, description=f"count of {spec.describe()} settled")
        return previous or 0

    def _is_enabled(self, spec: LocatorSpec) -> bool:
        element = self._find(spec)
        return element is not None and element.is_displayed() and element.is_enabled()

    def _enter(self, spec: LocatorSpec, text: str, *, replace: bool = True) -> None:
        """Focus a text input, optionally clear it, type, dismiss keyboard.

        Raises:
            FieldNotEditable: If the target is not a text input.
            TimeoutExceeded: If the field never appears.
        """
        field = self._wait_for(spec)
        if field.element_type not in EDITABLE_TYPES:
            msg = f"{self.name}: {spec.describe()} is {field.element_type or 'unknown'}, not a text input"
            raise FieldNotEditable(msg)
        field.tap()
        if replace:
            field.clear()
        field.type_text(text)
        self._session.hide_keyboard()
        logger.debug("%s: entered %d char(s) into %s", self.name, len(text), spec.describe())

    # ------------------------------------------------------------------
    # Dropdowns
    # ------------------------------------------------------------------

    def _option_labels(self, options: LocatorSpec, shown_before: frozenset[str] = frozenset()) -> list[str]:
        return [
            el.label for el in self._resolver.resolve(options) if el.label and el.label not in shown_before
        ]

    def _open_options(self, opener: LocatorSpec, options: LocatorSpec) -> tuple[list[str], frozenset[str]]:
        """Tap the opener and wait for the option list to settle.

        Buttons matching options that were already shown before the tap
        (a form laid out as a collection view) are not options.

        Returns:
            (labels, shown_before)
        """
        shown_before = frozenset(self._option_labels(options))
        self._click(opener)

        previous: list[str] | None = None

        def _settled() -> bool:
            nonlocal previous
            current = self._option_labels(options, shown_before)
            stable = bool(current) and current == previous
            previous = current
            return stable

        self._waiter.holds(_settled, description="option list settled")
        return previous or [], shown_before

    def _read_options(self, opener: LocatorSpec, options: LocatorSpec = MENU_OPTIONS) -> list[str]:
        """Open, read and close an option list without selecting."""
        labels, shown_before = self._open_options(opener, options)
        self._dismiss(options, shown_before)
        return labels

    def _select(
        self,
        opener: LocatorSpec,
        option: str,
        options: LocatorSpec = MENU_OPTIONS,
    ) -> None:
        """Select the exact-match option from a dropdown.

        Raises:
            OptionNotFound: If no option matches; the list is closed again,
                so nothing is selected.
        """
        labels, shown_before = self._open_options(opener, options)
        if option in labels:
            for el in self._resolver.resolve(options):
                if el.label == option:
                    el.tap()
                    self._waiter.holds(
                        lambda: option not in self._option_labels(options, shown_before),
                        description="options closed",
                    )
                    logger.info("%s: selected %r", self.name, option)
                    return
        self._dismiss(options, shown_before)
        raise OptionNotFound(option, labels)

    def _dismiss(self, options: LocatorSpec, shown_before: frozenset[str] = frozenset()) -> None:
        self._session.tap_outside()
        self._waiter.holds(
            lambda: not self._option_labels(options, shown_before), description="options dismissed"
        )

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def _scroll_to(
        self,
        spec: LocatorSpec,
        direction: ScrollDirection = ScrollDirection.DOWN,
    ) -> bool:
        """Bounded incremental scroll until spec is visible.

        Returns:
            True only if a query after the last gesture shows the target.
        """
        attempts = self._waits.max_scroll_attempts
        for attempt in range(attempts + 1):
            if self._visible(spec):
                return True
            if attempt == attempts:
                break
            self._session.scroll(direction)
        logger.info("%s: %s not found after %d scroll(s)", self.name, spec.describe(), attempts)
        return False

    def _scroll_to_label(self, label: str, direction: ScrollDirection = ScrollDirection.DOWN) -> bool:
        return self._scroll_to(label_predicate(label), direction)

    def _label_visible(self, label: str) -> bool:
        return self._visible(label_predicate(label))


def text_input(caption: str) -> LocatorSpec:
    """Editable field identified by its name or placeholder."""
    quoted = quote_predicate(caption)
    types = ", ".join(f"'{t}'" for t in sorted(EDITABLE_TYPES))
    return LocatorSpec.predicate(
        f"type IN {{{types}}} AND (name == {quoted} OR placeholderValue == {quoted})"
    )


def button(label: str) -> LocatorSpec:
    """Button by exact label or name."""
    return label_predicate(label, "XCUIElementTypeButton")


def buttons_among(labels: tuple[str, ...]) -> LocatorSpec:
    """Visible buttons whose label is one of labels."""
    joined = ", ".join(quote_predicate(label) for label in labels)
    return LocatorSpec.predicate(
        f"type == 'XCUIElementTypeButton' AND label IN {{{joined}}}", visible_only=True
    )
