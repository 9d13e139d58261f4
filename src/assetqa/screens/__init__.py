"""Screen objects for the Assets module."""

from assetqa.screens.asset_detail import AssetDetailScreen
from assetqa.screens.asset_list import AssetListScreen
from assetqa.screens.connections import NewConnectionScreen
from assetqa.screens.edit_asset import EditAssetScreen
from assetqa.screens.issues import NewIssueScreen
from assetqa.screens.login import (
    DashboardScreen,
    LoginScreen,
    SiteSelectionScreen,
    WelcomeScreen,
    login,
)
from assetqa.screens.ocp import CreateChildAssetScreen, LinkExistingNodeScreen
from assetqa.screens.tasks import NewTaskScreen, TaskDetailsScreen

__all__ = [
    "AssetDetailScreen",
    "AssetListScreen",
    "CreateChildAssetScreen",
    "DashboardScreen",
    "EditAssetScreen",
    "LinkExistingNodeScreen",
    "LoginScreen",
    "NewConnectionScreen",
    "NewIssueScreen",
    "NewTaskScreen",
    "SiteSelectionScreen",
    "TaskDetailsScreen",
    "WelcomeScreen",
    "login",
]
