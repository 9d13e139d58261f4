"""BaseSession / BaseElement ABCs — automation session interface.

AppiumSession (XCUITest) implements this; unit tests use an in-memory fake.
Screen objects only ever talk to these two interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetqa.core.models import BoundingBox, LocatorSpec, ScrollDirection


class BaseElement(ABC):
    """Handle to one element of the live accessibility tree."""

    @abstractmethod
    def tap(self) -> None:
        """Tap the element."""
        ...

    @abstractmethod
    def type_text(self, text: str) -> None:
        """Type text into the element (must be focused/editable)."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Clear the element's current value."""
        ...

    @abstractmethod
    def attribute(self, name: str) -> str | None:
        """Return an accessibility attribute (type, name, label, value, enabled, visible)."""
        ...

    @abstractmethod
    def bounding_box(self) -> BoundingBox:
        """Return the element frame."""
        ...

    @abstractmethod
    def is_displayed(self) -> bool:
        """Whether the element is on screen."""
        ...

    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether the element accepts interaction."""
        ...

    @property
    def element_type(self) -> str:
        return self.attribute("type") or ""

    @property
    def label(self) -> str:
        """label, falling back to name: XCUITest fills one or the other."""
        return self.attribute("label") or self.attribute("name") or ""

    @property
    def value(self) -> str:
        return self.attribute("value") or ""


class BaseSession(ABC):
    """One live connection to the application under test."""

    @abstractmethod
    def find_elements(self, spec: LocatorSpec) -> list[BaseElement]:
        """Query the accessibility tree. Absence is an empty list, never an error."""
        ...

    @abstractmethod
    def scroll(self, direction: ScrollDirection) -> None:
        """Perform one scroll gesture on the current screen."""
        ...

    @abstractmethod
    def hide_keyboard(self) -> None:
        """Dismiss the input method if shown."""
        ...

    @abstractmethod
    def tap_outside(self) -> None:
        """Tap an empty area to dismiss pickers/menus."""
        ...

    @abstractmethod
    def screenshot(self) -> bytes:
        """Capture current screen as PNG bytes."""
        ...

    @abstractmethod
    def is_alive(self) -> bool:
        """Whether the underlying connection still responds."""
        ...

    @abstractmethod
    def quit(self) -> None:
        """Close the connection."""
        ...

    def save_screenshot(self, path: Path) -> Path:
        """Save screenshot to file and return path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.screenshot())
        return path
