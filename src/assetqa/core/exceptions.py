"""assetqa exception hierarchy.

All exceptions inherit from AssetQAError.
TimeoutExceeded is recoverable: callers decide whether it means "absent" or "failed".
"""

from __future__ import annotations


class AssetQAError(Exception):
    """Base exception for all assetqa errors."""


class ConfigError(AssetQAError):
    """Configuration file load/validation error."""


class InvalidLocator(AssetQAError):  # noqa: N818
    """Locator spec is malformed (empty value or unsupported kind)."""


class TimeoutExceeded(AssetQAError):  # noqa: N818
    """A waited-for condition did not become true within the timeout."""

    def __init__(self, condition: str, timeout_ms: int) -> None:
        self.condition = condition
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms}ms waiting for: {condition}")


class OptionNotFound(AssetQAError):  # noqa: N818
    """Requested option is not present in a dropdown/picker."""

    def __init__(self, option: str, available: list[str] | None = None) -> None:
        self.option = option
        self.available = list(available or [])
        shown = ", ".join(self.available) if self.available else "none"
        super().__init__(f"Option '{option}' not found (available: {shown})")


class FieldNotEditable(AssetQAError):  # noqa: N818
    """Target element is not an editable text input."""


class ElementNotInteractable(AssetQAError):  # noqa: N818
    """Control never became present and enabled within the timeout."""


class ScreenNotReached(AssetQAError):  # noqa: N818
    """Navigation did not arrive at the expected screen."""

    def __init__(self, screen: str, detail: str = "") -> None:
        self.screen = screen
        msg = f"Expected screen not reached: {screen}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class SessionUnavailable(AssetQAError):  # noqa: N818
    """Automation session could not be created or has died."""


class ReporterError(AssetQAError):
    """Report generation error."""
