"""Asset list: search, grouping and drill-down into an asset."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.models import LocatorSpec
from assetqa.engine.locator import label_predicate, quote_predicate
from assetqa.screens.base import BaseScreen, buttons_among

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen

logger = logging.getLogger(__name__)

GROUPING_OPTIONS = ("No Grouping", "Group by Location", "Group by Asset Class")


class AssetListScreen(BaseScreen):
    name = "Asset List"
    signature = LocatorSpec.accessibility_id("plus")

    ASSETS_TAB = LocatorSpec.accessibility_id("list.bullet")
    SEARCH = LocatorSpec.predicate("type == 'XCUIElementTypeSearchField'")
    CELLS = LocatorSpec.predicate("type == 'XCUIElementTypeCell'", visible_only=True)
    GROUPING = LocatorSpec.predicate(
        "type == 'XCUIElementTypeButton' AND "
        "(name == 'line.3.horizontal.decrease.circle' OR name == 'ellipsis.circle' "
        "OR label == 'Grouping')"
    )

    def open(self) -> AssetListScreen:
        """Switch to the Assets tab unless already there."""
        if self.is_displayed():
            return self
        return self._navigate(lambda: self._click(self.ASSETS_TAB), AssetListScreen)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, term: str) -> int:
        """Type term into the search field and return the settled result count."""
        self._enter(self.SEARCH, term)
        count = self._settled_count(self.CELLS)
        logger.info("Search %r -> %d asset(s)", term, count)
        return count

    def clear_search(self) -> None:
        self._enter(self.SEARCH, "")
        self._settled_count(self.CELLS)

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def asset_count(self) -> int:
        return len(self._find_all(self.CELLS))

    def asset_names(self) -> list[str]:
        return [cell.label for cell in self._find_all(self.CELLS) if cell.label]

    def is_asset_listed(self, name: str) -> bool:
        return self._probe(self._cell_for(name))

    @staticmethod
    def _cell_for(name: str) -> LocatorSpec:
        return LocatorSpec.predicate(
            f"type == 'XCUIElementTypeCell' AND label CONTAINS {quote_predicate(name)}",
            visible_only=True,
        )

    def open_asset(self, name: str) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        detail = self._navigate(lambda: self._click(self._cell_for(name)), AssetDetailScreen)
        detail.opened_as = name
        return detail

    def open_first_asset(self) -> AssetDetailScreen:
        """Open whichever asset is listed first.

        Raises:
            TimeoutExceeded: If the list stays empty.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        cell = self._wait_for(self.CELLS)
        name = cell.label
        logger.info("Opening first asset: %r", name)
        detail = self._navigate(cell.tap, AssetDetailScreen)
        detail.opened_as = name
        return detail

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def open_grouping_menu(self) -> list[str]:
        """Open the grouping menu and return its options, leaving it open."""
        labels, _ = self._open_options(self.GROUPING, buttons_among(GROUPING_OPTIONS))
        return labels

    def select_grouping(self, option: str) -> None:
        self._select(self.GROUPING, option, buttons_among(GROUPING_OPTIONS))

    def has_group(self, header: str) -> bool:
        return self._visible(label_predicate(header))

