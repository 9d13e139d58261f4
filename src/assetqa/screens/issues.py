"""New Issue form, opened from an asset's Issues section."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.models import LocatorSpec
from assetqa.engine.locator import label_predicate
from assetqa.screens.base import BaseScreen, Dropdown, button, text_input

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen

logger = logging.getLogger(__name__)

_LINKED_PREFIX = "Creating issue for"


class NewIssueScreen(BaseScreen):
    name = "New Issue"
    signature = label_predicate("New Issue", "XCUIElementTypeStaticText")

    LINKED_ASSET = LocatorSpec.predicate(
        f"type == 'XCUIElementTypeStaticText' AND label BEGINSWITH '{_LINKED_PREFIX}'"
    )
    ISSUE_CLASS = Dropdown("Issue Class", "Select issue class")
    PRIORITY = Dropdown("Priority", "Select priority")
    TITLE = text_input("Title")
    CREATE = button("Create Issue")
    CANCEL = button("Cancel")

    def linked_asset_name(self) -> str:
        """Asset the issue is pre-linked to ("" if the banner is absent)."""
        banner = self._find(self.LINKED_ASSET)
        if banner is None:
            return ""
        return banner.label.removeprefix(_LINKED_PREFIX).strip(" :")

    def issue_class(self) -> str:
        element = self._find(self.ISSUE_CLASS.locator)
        return self.ISSUE_CLASS.read(element) if element is not None else ""

    def issue_class_options(self) -> list[str]:
        return self._read_options(self.ISSUE_CLASS.locator)

    def select_issue_class(self, label: str) -> None:
        self._select(self.ISSUE_CLASS.locator, label)

    def priority(self) -> str:
        element = self._find(self.PRIORITY.locator)
        return self.PRIORITY.read(element) if element is not None else ""

    def priority_options(self) -> list[str]:
        self._scroll_to(self.PRIORITY.locator)
        return self._read_options(self.PRIORITY.locator)

    def select_priority(self, label: str) -> None:
        self._scroll_to(self.PRIORITY.locator)
        self._select(self.PRIORITY.locator, label)

    def enter_title(self, title: str) -> None:
        self._enter(self.TITLE, title)

    def is_create_enabled(self) -> bool:
        return self._is_enabled(self.CREATE)

    def create(self) -> AssetDetailScreen:
        """Submit the issue.

        Raises:
            ElementNotInteractable: If Create is disabled.
            ScreenNotReached: If the form does not close.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        logger.info("Creating issue for %r", self.linked_asset_name())
        return self._leave_to(
            lambda: self._click(self.CREATE, timeout_ms=self._waits.short_timeout_ms),
            AssetDetailScreen,
        )

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)
