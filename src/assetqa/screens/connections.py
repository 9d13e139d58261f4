"""New Connection form (lineside / loadside)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.exceptions import ElementNotInteractable, OptionNotFound, ScreenNotReached
from assetqa.engine.locator import label_predicate
from assetqa.screens.base import BaseScreen, Dropdown, button

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen

logger = logging.getLogger(__name__)

DIRECTIONS = ("Lineside (Incoming)", "Loadside (Outgoing)")

# Option meaning "no node".
NO_NODE = "None"


class NewConnectionScreen(BaseScreen):
    name = "New Connection"
    signature = label_predicate("New Connection", "XCUIElementTypeStaticText")

    SOURCE = Dropdown("Source Node", "Select source node")
    TARGET = Dropdown("Target Node", "Select target node")
    CONNECTION_TYPE = Dropdown("Connection Type", "Select connection type")
    CREATE = button("Create")
    CANCEL = button("Cancel")

    def direction(self) -> str:
        """Label of the selected direction segment ("" if neither)."""
        for label in DIRECTIONS:
            segment = self._find(label_predicate(label, "XCUIElementTypeButton"))
            if segment is not None and segment.attribute("selected") in ("true", "1"):
                return label
        return ""

    def source_node(self) -> str:
        return self._read(self.SOURCE)

    def target_node(self) -> str:
        return self._read(self.TARGET)

    def connection_type(self) -> str:
        return self._read(self.CONNECTION_TYPE)

    def _read(self, dropdown: Dropdown) -> str:
        element = self._find(dropdown.locator)
        if element is None:
            return ""
        value = dropdown.read(element)
        return "" if value == NO_NODE else value

    def node_options(self, dropdown: Dropdown | None = None) -> list[str]:
        """Nodes offered by a node dropdown, excluding the empty choice."""
        target = dropdown or self._editable_node()
        labels = self._read_options(target.locator)
        return [label for label in labels if label != NO_NODE]

    def select_source_node(self, label: str) -> None:
        self._select(self.SOURCE.locator, label)

    def select_target_node(self, label: str) -> None:
        self._select(self.TARGET.locator, label)

    def select_first_available_node(self) -> str:
        """Pick the first real node in whichever side is not pre-filled.

        Returns:
            The chosen node label.

        Raises:
            OptionNotFound: If no node is offered.
        """
        dropdown = self._editable_node()
        options = self.node_options(dropdown)
        if not options:
            raise OptionNotFound("<any node>", [])
        self._select(dropdown.locator, options[0])
        logger.info("%s: %s -> %r", self.name, dropdown.caption, options[0])
        return options[0]

    def _editable_node(self) -> Dropdown:
        # The current asset pre-fills one side depending on the direction.
        return self.TARGET if self.source_node() else self.SOURCE

    def is_create_enabled(self) -> bool:
        return self._is_enabled(self.CREATE)

    def create(self) -> AssetDetailScreen:
        """Create the connection.

        Raises:
            ElementNotInteractable: If Create is disabled.
            ScreenNotReached: If the app keeps the form open.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(
            lambda: self._click(self.CREATE, timeout_ms=self._waits.short_timeout_ms),
            AssetDetailScreen,
        )

    def try_create(self) -> bool:
        """Attempt creation; False when the app blocks it and the form remains."""
        try:
            self.create()
        except (ElementNotInteractable, ScreenNotReached) as e:
            logger.info("%s: creation blocked: %s", self.name, e)
            return False
        return True

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)

