"""Bootstrap screens: company code, sign in, site selection, dashboard."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.exceptions import ConfigError
from assetqa.core.models import LocatorSpec
from assetqa.engine.locator import label_predicate, quote_predicate
from assetqa.screens.asset_list import AssetListScreen
from assetqa.screens.base import BaseScreen, button

if TYPE_CHECKING:
    from assetqa.core.models import CredentialsConfig, WaitConfig
    from assetqa.engine.base import BaseSession

logger = logging.getLogger(__name__)


class DashboardScreen(BaseScreen):
    """Landing screen once a site is selected."""

    name = "Dashboard"
    signature = LocatorSpec.accessibility_id("building.2")

    ASSETS_TAB = LocatorSpec.accessibility_id("list.bullet")

    def open_assets(self) -> AssetListScreen:
        return self._navigate(lambda: self._click(self.ASSETS_TAB), AssetListScreen)


class SiteSelectionScreen(BaseScreen):
    name = "Site Selection"
    signature = label_predicate("Select Site", "XCUIElementTypeStaticText")

    SEARCH = LocatorSpec.predicate(
        "type == 'XCUIElementTypeSearchField' OR value == 'Search sites...'"
    )
    SITES = LocatorSpec.predicate("type == 'XCUIElementTypeCell'", visible_only=True)

    def site_names(self) -> list[str]:
        return [cell.label for cell in self._find_all(self.SITES) if cell.label]

    def select_site(self, site_name: str) -> DashboardScreen:
        """Search for site_name and open it.

        Raises:
            ElementNotInteractable: If the site is not listed.
        """
        if self._exists(self.SEARCH):
            self._enter(self.SEARCH, site_name)
        cell = LocatorSpec.predicate(
            f"type == 'XCUIElementTypeCell' AND label CONTAINS {quote_predicate(site_name)}",
            visible_only=True,
        )
        logger.info("Selecting site %r", site_name)
        return self._navigate(lambda: self._click(cell), DashboardScreen)

    def select_first_site(self) -> DashboardScreen:
        cell = self._wait_for(self.SITES)
        logger.info("Selecting first site %r", cell.label)
        return self._navigate(cell.tap, DashboardScreen)


class LoginScreen(BaseScreen):
    name = "Sign In"
    signature = LocatorSpec.predicate("type == 'XCUIElementTypeSecureTextField'")

    EMAIL = LocatorSpec.predicate("type == 'XCUIElementTypeTextField'", visible_only=True)
    PASSWORD = LocatorSpec.predicate("type == 'XCUIElementTypeSecureTextField'")
    SIGN_IN = button("Sign In")
    SAVE_PASSWORD_NOT_NOW = LocatorSpec.accessibility_id("Not Now")
    VIEW_SITES = LocatorSpec.accessibility_id("View Sites")

    def sign_in(self, email: str, password: str) -> SiteSelectionScreen | DashboardScreen:
        """Submit credentials and land on site selection (or straight on the
        dashboard when the account remembers its site)."""
        self._enter(self.EMAIL, email)
        self._enter(self.PASSWORD, password)
        self._click(self.SIGN_IN)
        logger.info("Signed in as %s", email)

        if self._probe(self.SAVE_PASSWORD_NOT_NOW):
            self._click(self.SAVE_PASSWORD_NOT_NOW)

        sites = self._screen(SiteSelectionScreen)
        dashboard = self._screen(DashboardScreen)
        self._waiter.until(
            lambda: (
                sites.is_displayed(0)
                or dashboard.is_displayed(0)
                or self._visible(self.VIEW_SITES)
            ),
            description="site selection or dashboard after sign in",
        )
        if self._visible(self.VIEW_SITES):
            return self._navigate(lambda: self._click(self.VIEW_SITES), SiteSelectionScreen)
        if sites.is_displayed(0):
            return sites
        return dashboard


class WelcomeScreen(BaseScreen):
    name = "Welcome"
    signature = button("Continue")

    COMPANY_CODE = LocatorSpec.predicate("type == 'XCUIElementTypeTextField'")
    CONTINUE = button("Continue")
    NOT_FOUND = LocatorSpec.predicate(
        "type == 'XCUIElementTypeStaticText' AND label CONTAINS 'not found'"
    )

    def submit_company_code(self, company_code: str) -> LoginScreen:
        self._enter(self.COMPANY_CODE, company_code)
        return self._navigate(lambda: self._click(self.CONTINUE), LoginScreen)

    def is_company_not_found(self) -> bool:
        return self._probe(self.NOT_FOUND)


def login(
    session: BaseSession,
    credentials: CredentialsConfig,
    waits: WaitConfig | None = None,
) -> DashboardScreen:
    """Walk the bootstrap screens from wherever the app starts.

    Already-authenticated sessions (no-reset runs) go straight through.

    Raises:
        ConfigError: If credentials are needed but not configured.
    """
    dashboard = DashboardScreen(session, waits)
    if dashboard.is_displayed():
        logger.info("Already signed in")
        return dashboard

    welcome = WelcomeScreen(session, waits)
    login_screen = LoginScreen(session, waits)
    if welcome.is_displayed():
        _require(credentials.company_code, "credentials.company_code")
        login_screen = welcome.submit_company_code(credentials.company_code)

    if login_screen.is_displayed():
        _require(credentials.email, "credentials.email")
        _require(credentials.password, "credentials.password")
        landed = login_screen.sign_in(credentials.email, credentials.password)
        if isinstance(landed, DashboardScreen):
            return landed.wait_until_displayed()
        sites = landed
    else:
        sites = SiteSelectionScreen(session, waits).wait_until_displayed()

    if credentials.site_name:
        return sites.select_site(credentials.site_name)
    return sites.select_first_site()


def _require(value: str, key: str) -> None:
    if not value:
        msg = f"{key} is not configured (set it in assetqa.config.yaml or ASSETQA_ env)"
        raise ConfigError(msg)
