"""Automation session layer."""

from assetqa.engine.appium import AppiumSession, acquire_session, release_session
from assetqa.engine.locator import LocatorResolver
from assetqa.engine.waiter import Waiter

__all__ = ["AppiumSession", "LocatorResolver", "Waiter", "acquire_session", "release_session"]
