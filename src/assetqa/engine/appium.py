"""AppiumSession — XCUITest automation session.

Implements BaseSession on top of Appium-Python-Client. Selenium exceptions
are converted here: a failed start becomes SessionUnavailable, a missing
element is an empty result, a stale element is treated as gone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from appium import webdriver
from appium.options.ios import XCUITestOptions
from appium.webdriver.common.appiumby import AppiumBy
from appium.webdriver.applicationstate import ApplicationState
from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    WebDriverException,
)

from assetqa.core.config import require_session_target
from assetqa.core.exceptions import SessionUnavailable
from assetqa.core.models import BoundingBox, LocatorKind, LocatorSpec, ScrollDirection
from assetqa.engine.base import BaseElement, BaseSession
from assetqa.engine.locator import quote_predicate
from assetqa.engine.waiter import Waiter

if TYPE_CHECKING:
    from appium.webdriver.webelement import WebElement

    from assetqa.core.models import AppiumConfig

logger = logging.getLogger(__name__)

_BY: dict[str, str] = {
    LocatorKind.ACCESSIBILITY_ID: AppiumBy.ACCESSIBILITY_ID,
    LocatorKind.PREDICATE: AppiumBy.IOS_PREDICATE,
    LocatorKind.TEXT: AppiumBy.IOS_PREDICATE,
    LocatorKind.CLASS_CHAIN: AppiumBy.IOS_CLASS_CHAIN,
}


def build_options(config: AppiumConfig) -> XCUITestOptions:
    """Translate AppiumConfig into XCUITest capabilities."""
    options = XCUITestOptions()
    options.platform_name = config.platform_name
    options.automation_name = config.automation_name
    options.device_name = config.device_name
    if config.platform_version:
        options.platform_version = config.platform_version
    if config.udid:
        options.udid = config.udid
    if config.app_path:
        options.app = config.app_path
    if config.bundle_id:
        options.bundle_id = config.bundle_id
    options.no_reset = config.no_reset
    options.full_reset = config.full_reset
    options.new_command_timeout = config.new_command_timeout_s
    if config.wda_local_port is not None:
        options.set_capability("appium:wdaLocalPort", config.wda_local_port)
    options.set_capability("appium:autoAcceptAlerts", config.auto_accept_alerts)
    # Waiting for quiescence stalls on animated screens; readiness is
    # checked by the screen objects instead.
    options.set_capability("appium:waitForQuiescence", False)
    options.set_capability("appium:simpleIsVisibleCheck", True)
    return options


def acquire_session(config: AppiumConfig) -> AppiumSession:
    """Launch/attach to the app and return a live session.

    Raises:
        ConfigError: If no app path or bundle id is configured.
        SessionUnavailable: If the Appium server refuses or fails the session.
    """
    require_session_target(config)
    options = build_options(config)
    logger.info(
        "Starting session: device=%s udid=%s server=%s no_reset=%s",
        config.device_name,
        config.udid or "-",
        config.server_url,
        config.no_reset,
    )
    try:
        driver = webdriver.Remote(config.server_url, options=options)
    except WebDriverException as e:
        msg = f"Failed to start Appium session: {e.msg or e}"
        raise SessionUnavailable(msg) from e
    except OSError as e:
        msg = f"Appium server unreachable at {config.server_url}: {e}"
        raise SessionUnavailable(msg) from e
    return AppiumSession(driver, bundle_id=config.bundle_id)


def release_session(session: BaseSession, *, terminate: bool = True) -> None:
    """Terminate the app (unless terminate is False) and quit.

    Never raises; safe to call twice.
    """
    if terminate and isinstance(session, AppiumSession):
        session.terminate_app()
    try:
        session.quit()
    except WebDriverException:
        logger.warning("Error while quitting session", exc_info=True)


class AppiumElement(BaseElement):
    """WebElement wrapper."""

    def __init__(self, element: WebElement) -> None:
        self._element = element

    def tap(self) -> None:
        self._element.click()

    def type_text(self, text: str) -> None:
        self._element.send_keys(text)

    def clear(self) -> None:
        self._element.clear()

    def attribute(self, name: str) -> str | None:
        try:
            value = self._element.get_attribute(name)
        except StaleElementReferenceException:
            return None
        return None if value is None else str(value)

    def bounding_box(self) -> BoundingBox:
        rect = self._element.rect
        return BoundingBox(
            x=int(rect["x"]),
            y=int(rect["y"]),
            width=int(rect["width"]),
            height=int(rect["height"]),
        )

    def is_displayed(self) -> bool:
        try:
            return bool(self._element.is_displayed())
        except StaleElementReferenceException:
            return False

    def is_enabled(self) -> bool:
        try:
            return bool(self._element.is_enabled())
        except StaleElementReferenceException:
            return False


class AppiumSession(BaseSession):
    """BaseSession backed by an Appium Remote driver."""

    def __init__(self, driver: Any, bundle_id: str = "") -> None:
        self._driver = driver
        self._bundle_id = bundle_id
        self._closed = False

    @property
    def driver(self) -> Any:
        """Underlying Remote driver. Raises SessionUnavailable once quit."""
        if self._closed:
            msg = "Session already released"
            raise SessionUnavailable(msg)
        return self._driver

    def find_elements(self, spec: LocatorSpec) -> list[BaseElement]:
        by = _BY[spec.kind]
        value = spec.value
        if spec.kind == LocatorKind.TEXT:
            quoted = quote_predicate(spec.value)
            value = f"label == {quoted} OR name == {quoted} OR value == {quoted}"
        try:
            found = self.driver.find_elements(by, value)
        except NoSuchElementException:
            return []
        return [AppiumElement(el) for el in found]

    def scroll(self, direction: ScrollDirection) -> None:
        # Content moves opposite to the finger.
        swipe = "up" if direction == ScrollDirection.DOWN else "down"
        self.driver.execute_script("mobile: swipe", {"direction": swipe})

    def hide_keyboard(self) -> None:
        try:
            if self.driver.is_keyboard_shown():
                self.driver.hide_keyboard()
        except WebDriverException:
            logger.debug("hide_keyboard not supported on this screen")

    def tap_outside(self) -> None:
        size = self.driver.get_window_size()
        self.driver.execute_script(
            "mobile: tap", {"x": size["width"] // 2, "y": int(size["height"] * 0.08)}
        )

    def screenshot(self) -> bytes:
        return self.driver.get_screenshot_as_png()

    def is_alive(self) -> bool:
        if self._closed:
            return False
        try:
            return self._driver.session_id is not None and bool(self._driver.get_window_size())
        except WebDriverException:
            return False

    def terminate_app(self) -> None:
        """Terminate the app under test if it is running."""
        if self._closed or not self._bundle_id:
            return
        try:
            state = self._driver.query_app_state(self._bundle_id)
            if state != ApplicationState.NOT_INSTALLED and state != ApplicationState.NOT_RUNNING:
                self._driver.terminate_app(self._bundle_id)
                Waiter(timeout_ms=3000, poll_interval_ms=100).holds(
                    lambda: self._driver.query_app_state(self._bundle_id)
                    == ApplicationState.NOT_RUNNING,
                    description="app terminated",
                )
        except WebDriverException:
            logger.warning("Could not terminate %s", self._bundle_id, exc_info=True)

    def activate_app(self) -> None:
        """Bring the app under test to the foreground."""
        if self._bundle_id:
            self.driver.activate_app(self._bundle_id)

    def quit(self) -> None:
        if self._closed:
            return
        try:
            self._driver.quit()
            logger.info("Session closed")
        finally:
            self._closed = True
