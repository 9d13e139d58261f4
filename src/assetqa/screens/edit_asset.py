"""Edit Asset Details: asset class, subtype and core attributes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.models import LocatorSpec
from assetqa.engine.locator import label_predicate
from assetqa.screens.base import MENU_OPTIONS, BaseScreen, Dropdown, button, text_input

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen

logger = logging.getLogger(__name__)

# Subtype value meaning "nothing selected".
NO_SUBTYPE = "None"


class EditAssetScreen(BaseScreen):
    name = "Edit Asset"
    signature = LocatorSpec.accessibility_id("Save Changes")

    ASSET_CLASS = Dropdown("Asset Class", "Select asset class")
    SUBTYPE = Dropdown("Asset Subtype", "Select asset subtype")
    SAVE = button("Save Changes")
    CANCEL = button("Cancel")

    # ------------------------------------------------------------------
    # Asset class
    # ------------------------------------------------------------------

    def asset_class(self) -> str:
        return self._read(self.ASSET_CLASS)

    def select_asset_class(self, label: str) -> None:
        """Select an asset class; a no-op when it is already selected."""
        if self.asset_class() == label:
            logger.debug("Asset class already %r", label)
            return
        self._select(self.ASSET_CLASS.locator, label)

    def asset_class_options(self) -> list[str]:
        return self._read_options(self.ASSET_CLASS.locator)

    # ------------------------------------------------------------------
    # Subtype
    # ------------------------------------------------------------------

    def subtype(self) -> str:
        """Current subtype; "" when none is shown."""
        return self._read(self.SUBTYPE)

    def is_subtype_selected(self) -> bool:
        return self.subtype() not in ("", NO_SUBTYPE)

    def is_subtype_dropdown_displayed(self) -> bool:
        return self._probe(self.SUBTYPE.locator)

    def subtype_options(self) -> list[str]:
        """Open the subtype list, read it, and close it again."""
        self._scroll_to(self.SUBTYPE.locator)
        return self._read_options(self.SUBTYPE.locator)

    def select_subtype(self, label: str) -> None:
        """Select an exact subtype.

        Raises:
            OptionNotFound: When the class offers no such subtype. The
                current subtype is left unchanged.
        """
        self._scroll_to(self.SUBTYPE.locator)
        self._select(self.SUBTYPE.locator, label, MENU_OPTIONS)

    def _read(self, dropdown: Dropdown) -> str:
        element = self._find(dropdown.locator)
        return dropdown.read(element) if element is not None else ""

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def enter_field(self, label: str, text: str, *, replace: bool = True) -> None:
        spec = text_input(label)
        self._scroll_to(spec)
        self._enter(spec, text, replace=replace)

    def field_value(self, label: str) -> str:
        spec = text_input(label)
        self._scroll_to(spec)
        element = self._find(spec)
        if element is None:
            return ""
        value = element.value
        # An empty field reports its placeholder as value.
        placeholder = element.attribute("placeholderValue") or ""
        return "" if value == placeholder else value

    def is_core_attributes_visible(self) -> bool:
        return self._scroll_to(label_predicate("Core Attributes", "XCUIElementTypeStaticText"))

    # ------------------------------------------------------------------
    # Leaving
    # ------------------------------------------------------------------

    def save(self) -> AssetDetailScreen:
        """Save and confirm the form closed onto the asset details.

        Raises:
            ScreenNotReached: If the form is still showing, e.g. the app
                rejected the changes.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.SAVE), AssetDetailScreen)

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)
