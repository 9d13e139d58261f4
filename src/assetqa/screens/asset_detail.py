"""Asset details: sections for tasks, issues, connections and OCP children."""

from __future__ import annotations

import logging
import re

from assetqa.core.models import ConnectionKind, LocatorSpec, ScrollDirection
from assetqa.engine.locator import label_predicate, quote_predicate
from assetqa.screens.asset_list import AssetListScreen
from assetqa.screens.base import BaseScreen, button, buttons_among
from assetqa.screens.connections import NewConnectionScreen
from assetqa.screens.edit_asset import EditAssetScreen
from assetqa.screens.issues import NewIssueScreen
from assetqa.screens.ocp import CreateChildAssetScreen, LinkExistingNodeScreen
from assetqa.screens.tasks import NewTaskScreen, TaskDetailsScreen

logger = logging.getLogger(__name__)

SECTIONS = ("Tasks", "Issues", "Connections", "OCP")

CONNECTION_OPTIONS: dict[ConnectionKind, str] = {
    ConnectionKind.LINESIDE: "New Lineside Connection",
    ConnectionKind.LOADSIDE: "New Loadside Connection",
}
OCP_OPTIONS = ("Create New Child", "Link Existing Node")

STATIC_TEXTS = LocatorSpec.predicate("type == 'XCUIElementTypeStaticText'", visible_only=True)

_COUNT = re.compile(r"\((\d+)\)|(\d+)$")


def section_header(section: str) -> LocatorSpec:
    """Section title text, which may carry a count suffix."""
    return LocatorSpec.predicate(
        f"type == 'XCUIElementTypeStaticText' AND label BEGINSWITH {quote_predicate(section)}",
        visible_only=True,
    )


class AssetDetailScreen(BaseScreen):
    name = "Asset Details"
    signature = label_predicate("Asset Details", "XCUIElementTypeStaticText")

    EDIT = LocatorSpec.accessibility_id("Edit")
    CLOSE = LocatorSpec.predicate(
        "type == 'XCUIElementTypeButton' AND (name == 'Close' OR name == 'xmark' OR name == 'Done')"
    )
    ADD_TASK = button("Add Task")
    ADD_ISSUE = button("Add Issue")
    ADD_CONNECTION = button("Add Connection")
    ADD_OCP = button("Add OCP")

    # Name the asset was opened under, when known.
    opened_as: str | None = None

    def asset_name(self) -> str:
        return self.opened_as or ""

    def edit(self) -> EditAssetScreen:
        return self._navigate(lambda: self._click(self.EDIT), EditAssetScreen)

    def close(self) -> AssetListScreen:
        """Return to the asset list."""
        return self._navigate(lambda: self._click(self.CLOSE), AssetListScreen)

    def scroll_to_section(self, label: str) -> bool:
        found = self._scroll_to(section_header(label))
        logger.debug("Section %r visible: %s", label, found)
        return found

    def scroll_to_top(self) -> None:
        self._scroll_to(self.signature, ScrollDirection.UP)

    # ------------------------------------------------------------------
    # Section actions
    # ------------------------------------------------------------------

    def add_task(self) -> NewTaskScreen:
        self.scroll_to_section("Tasks")
        return self._navigate(lambda: self._click(self.ADD_TASK), NewTaskScreen)

    def open_task(self, title: str) -> TaskDetailsScreen:
        spec = label_predicate(title, "XCUIElementTypeStaticText")
        self._scroll_to(spec)
        return self._navigate(lambda: self._click(spec), TaskDetailsScreen)

    def add_issue(self) -> NewIssueScreen:
        self.scroll_to_section("Issues")
        return self._navigate(lambda: self._click(self.ADD_ISSUE), NewIssueScreen)

    def add_connection(self, kind: ConnectionKind | str) -> NewConnectionScreen:
        option = CONNECTION_OPTIONS[ConnectionKind(kind)]
        self.scroll_to_section("Connections")
        return self._navigate(
            lambda: self._select(
                self.ADD_CONNECTION, option, buttons_among(tuple(CONNECTION_OPTIONS.values()))
            ),
            NewConnectionScreen,
        )

    def ocp_options(self) -> list[str]:
        self.scroll_to_section("OCP")
        return self._read_options(self.ADD_OCP, buttons_among(OCP_OPTIONS))

    def add_ocp_child(self) -> CreateChildAssetScreen:
        self.scroll_to_section("OCP")
        return self._navigate(
            lambda: self._select(self.ADD_OCP, OCP_OPTIONS[0], buttons_among(OCP_OPTIONS)),
            CreateChildAssetScreen,
        )

    def link_existing_node(self) -> LinkExistingNodeScreen:
        self.scroll_to_section("OCP")
        return self._navigate(
            lambda: self._select(self.ADD_OCP, OCP_OPTIONS[1], buttons_among(OCP_OPTIONS)),
            LinkExistingNodeScreen,
        )

    # ------------------------------------------------------------------
    # Section contents
    # ------------------------------------------------------------------

    def task_titles(self) -> list[str]:
        """Visible static texts laid out between the Tasks and Issues headers."""
        if not self.scroll_to_section("Tasks"):
            return []
        top = self._find(section_header("Tasks"))
        bottom = self._find(section_header("Issues"))
        if top is None:
            return []
        upper = top.bounding_box().y
        lower = bottom.bounding_box().y if bottom is not None else None
        titles: list[str] = []
        for text in self._find_all(STATIC_TEXTS):
            y = text.bounding_box().y
            if y > upper and (lower is None or y < lower) and text.label:
                titles.append(text.label)
        return titles

    def has_task(self, title: str) -> bool:
        return self._scroll_to(label_predicate(title, "XCUIElementTypeStaticText"))

    def has_issue(self, title: str) -> bool:
        return self._scroll_to(label_predicate(title, "XCUIElementTypeStaticText"))

    def has_connection_to(self, node: str) -> bool:
        self.scroll_to_section("Connections")
        spec = LocatorSpec.predicate(
            f"type == 'XCUIElementTypeStaticText' AND label CONTAINS {quote_predicate(node)}",
            visible_only=True,
        )
        return self._scroll_to(spec)

    def issue_count(self) -> int:
        return self._section_count("Issues")

    def connection_count(self) -> int:
        return self._section_count("Connections")

    def ocp_count(self) -> int:
        return self._section_count("OCP")

    def _section_count(self, section: str) -> int:
        """Read the count badge next to a section header (0 when absent)."""
        if not self.scroll_to_section(section):
            return 0
        header = self._find(section_header(section))
        if header is None:
            return 0
        for text in (header.label, header.value):
            match = _COUNT.search(text.removeprefix(section).strip())
            if match:
                return int(match.group(1) or match.group(2))
        return 0
