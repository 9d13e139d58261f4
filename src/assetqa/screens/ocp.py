"""OCP (overcurrent protection) children: link existing nodes, create child."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from assetqa.core.models import LocatorSpec
from assetqa.engine.locator import label_predicate, quote_predicate
from assetqa.screens.base import BaseScreen, Dropdown, button, text_input

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen

logger = logging.getLogger(__name__)

_LINK_COUNT = re.compile(r"\((\d+)\)")


class LinkExistingNodeScreen(BaseScreen):
    """Multi-select list of assets that can become OCP children."""

    name = "Link Existing Nodes"
    signature = label_predicate("Link Existing Nodes", "XCUIElementTypeStaticText")

    SEARCH = LocatorSpec.predicate("type == 'XCUIElementTypeSearchField'")
    ROWS = LocatorSpec.predicate("type == 'XCUIElementTypeCell'", visible_only=True)
    CLEAR_ALL = button("Clear All")
    LINK = LocatorSpec.predicate(
        "type == 'XCUIElementTypeButton' AND (label == 'Link' OR label BEGINSWITH 'Link (')"
    )
    CANCEL = button("Cancel")

    def search(self, term: str) -> int:
        self._enter(self.SEARCH, term)
        return self._settled_count(self.ROWS)

    def linkable_count(self) -> int:
        return len(self._find_all(self.ROWS))

    def node_names(self) -> list[str]:
        return [row.label for row in self._find_all(self.ROWS) if row.label]

    def select_node(self, name: str) -> None:
        self._click(
            LocatorSpec.predicate(
                f"type == 'XCUIElementTypeCell' AND label CONTAINS {quote_predicate(name)}",
                visible_only=True,
            )
        )

    def select_first_node(self) -> str:
        row = self._wait_for(self.ROWS)
        name = row.label
        row.tap()
        logger.info("Selected node %r", name)
        return name

    def selected_count(self) -> int:
        """Count shown on the Link button, else rows flagged selected."""
        link = self._find(self.LINK)
        if link is not None:
            match = _LINK_COUNT.search(link.label)
            if match:
                return int(match.group(1))
        rows = self._find_all(self.ROWS)
        return sum(1 for row in rows if row.attribute("selected") in ("true", "1"))

    def clear_all(self) -> None:
        self._click(self.CLEAR_ALL)
        self._waiter.holds(lambda: self.selected_count() == 0, description="selection cleared")

    def link(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.LINK), AssetDetailScreen)

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)


class CreateChildAssetScreen(BaseScreen):
    name = "Create Child Asset"
    signature = label_predicate("Create Child Asset", "XCUIElementTypeStaticText")

    NAME = text_input("Enter name")
    ASSET_CLASS = Dropdown("Asset Class", "Select asset class")
    PARENT_ENCLOSURE = LocatorSpec.predicate(
        "type == 'XCUIElementTypeStaticText' AND label BEGINSWITH 'Parent Enclosure'"
    )
    CREATE = button("Create Asset")
    CANCEL = button("Cancel")

    def enter_name(self, name: str) -> None:
        self._enter(self.NAME, name)

    def asset_class(self) -> str:
        element = self._find(self.ASSET_CLASS.locator)
        return self.ASSET_CLASS.read(element) if element is not None else ""

    def asset_class_options(self) -> list[str]:
        return self._read_options(self.ASSET_CLASS.locator)

    def select_asset_class(self, label: str) -> None:
        self._select(self.ASSET_CLASS.locator, label)

    def parent_enclosure(self) -> str:
        """Parent shown on the form, i.e. the asset the child is created under."""
        element = self._find(self.PARENT_ENCLOSURE)
        if element is None:
            return ""
        if element.value:
            return element.value
        return element.label.removeprefix("Parent Enclosure").strip(" :")

    def is_create_enabled(self) -> bool:
        return self._is_enabled(self.CREATE)

    def create(self) -> AssetDetailScreen:
        """Create the child asset.

        Raises:
            ElementNotInteractable: If Create is disabled (name or class missing).
            ScreenNotReached: If the form does not close.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        self._scroll_to(self.CREATE)
        return self._leave_to(
            lambda: self._click(self.CREATE, timeout_ms=self._waits.short_timeout_ms),
            AssetDetailScreen,
        )

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)
