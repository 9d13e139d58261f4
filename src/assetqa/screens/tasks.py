"""New Task form and Task Details."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assetqa.engine.locator import label_predicate
from assetqa.screens.base import BaseScreen, button, text_input

if TYPE_CHECKING:
    from assetqa.screens.asset_detail import AssetDetailScreen


class NewTaskScreen(BaseScreen):
    name = "New Task"
    signature = label_predicate("New Task", "XCUIElementTypeStaticText")

    TITLE = text_input("Title")
    DESCRIPTION = text_input("Description")
    CREATE = button("Create Task")
    CANCEL = button("Cancel")

    def enter_title(self, title: str) -> None:
        self._enter(self.TITLE, title)

    def enter_description(self, text: str) -> None:
        self._enter(self.DESCRIPTION, text)

    def is_create_enabled(self) -> bool:
        """Create stays disabled while the title or the description is empty."""
        return self._is_enabled(self.CREATE)

    def create(self) -> AssetDetailScreen:
        """Submit the task.

        Raises:
            ElementNotInteractable: If Create is disabled (title or description missing).
            ScreenNotReached: If the form does not close.
        """
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(
            lambda: self._click(self.CREATE, timeout_ms=self._waits.short_timeout_ms),
            AssetDetailScreen,
        )

    def cancel(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.CANCEL), AssetDetailScreen)


class TaskDetailsScreen(BaseScreen):
    name = "Task Details"
    signature = label_predicate("Task Details", "XCUIElementTypeStaticText")

    DELETE = button("Delete Task")
    CONFIRM_DELETE = label_predicate("Delete", "XCUIElementTypeButton")
    BACK = button("Back")

    def is_delete_available(self) -> bool:
        return self._scroll_to(self.DELETE)

    def delete(self) -> AssetDetailScreen:
        """Delete the task, confirming the alert."""
        from assetqa.screens.asset_detail import AssetDetailScreen

        self._scroll_to(self.DELETE)
        self._click(self.DELETE)
        return self._leave_to(lambda: self._click(self.CONFIRM_DELETE), AssetDetailScreen)

    def back(self) -> AssetDetailScreen:
        from assetqa.screens.asset_detail import AssetDetailScreen

        return self._leave_to(lambda: self._click(self.BACK), AssetDetailScreen)
