"""Device fixtures: config, Appium sessions, the case runner and screens.

Sessions are opened per test class and signed in once. A class marked
``@pytest.mark.no_reset`` keeps app state; while no-reset is in effect one
session is shared across classes until the run ends; a class that needs a
reset closes it before opening its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TypeVar

import pytest

from assetqa.core.config import load_config, require_session_target
from assetqa.core.models import Config
from assetqa.engine.base import BaseSession
from assetqa.reporters import build_reporter
from assetqa.reporters.base import BaseReporter
from assetqa.runner.case import TestCaseRunner
from assetqa.runner.policy import SessionPolicy
from assetqa.runner.pool import SessionPool
from assetqa.runner.screenshots import ScreenshotStore
from assetqa.screens.asset_detail import AssetDetailScreen
from assetqa.screens.asset_list import AssetListScreen
from assetqa.screens.base import BaseScreen
from assetqa.screens.connections import NewConnectionScreen
from assetqa.screens.edit_asset import EditAssetScreen
from assetqa.screens.issues import NewIssueScreen
from assetqa.screens.ocp import CreateChildAssetScreen, LinkExistingNodeScreen
from assetqa.screens.tasks import NewTaskScreen, TaskDetailsScreen

logger = logging.getLogger("assetqa.e2e")

ScreenT = TypeVar("ScreenT", bound=BaseScreen)

# Forms that close back onto the asset details via cancel().
_FORMS: tuple[type[BaseScreen], ...] = (
    EditAssetScreen,
    NewTaskScreen,
    NewIssueScreen,
    NewConnectionScreen,
    LinkExistingNodeScreen,
    CreateChildAssetScreen,
)


# ── Run-wide ──


@pytest.fixture(scope="session")
def config(pytestconfig: pytest.Config) -> Config:
    path = pytestconfig.getoption("--assetqa-config")
    no_reset = pytestconfig.getoption("assetqa_no_reset")
    overrides = {"appium": {"no_reset": no_reset}} if no_reset is not None else None
    cfg = load_config(config_path=Path(path) if path else None, overrides=overrides)
    require_session_target(cfg.appium)
    return cfg


@pytest.fixture(scope="session")
def policy(config: Config) -> SessionPolicy:
    return SessionPolicy(default_no_reset=config.appium.no_reset)


@pytest.fixture(scope="session")
def reporter(config: Config) -> Iterator[BaseReporter]:
    reporter = build_reporter(config.reports.reporters)
    yield reporter
    report = reporter.flush(Path(config.reports.reports_dir))
    logger.info("Report written: %s", report)


@pytest.fixture(scope="session")
def screenshots(config: Config) -> ScreenshotStore:
    store = ScreenshotStore(Path(config.reports.screenshots_dir))
    store.cleanup_older_than(config.reports.screenshot_retention_days)
    return store


@pytest.fixture(scope="session")
def session_pool(config: Config, policy: SessionPolicy) -> Iterator[SessionPool]:
    pool = SessionPool(config, policy)
    yield pool
    pool.close()


# ── Per class ──


@pytest.fixture(scope="class")
def session(request: pytest.FixtureRequest, session_pool: SessionPool) -> Iterator[BaseSession]:
    marker = request.node.get_closest_marker("no_reset")
    wanted: bool | None = None
    if marker is not None:
        wanted = bool(marker.args[0]) if marker.args else True
    with session_pool.lease(no_reset=wanted) as session:
        yield session


@pytest.fixture(scope="class")
def runner(
    session: BaseSession, reporter: BaseReporter, screenshots: ScreenshotStore
) -> TestCaseRunner:
    return TestCaseRunner(lambda: session, reporter, screenshots)


class Screens:
    """Screen factory bound to the class session."""

    def __init__(self, session: BaseSession, config: Config) -> None:
        self.session = session
        self.config = config

    def get(self, screen_cls: type[ScreenT]) -> ScreenT:
        return screen_cls(self.session, self.config.waits)

    def asset_list(self) -> AssetListScreen:
        return self.get(AssetListScreen).open()

    def first_asset(self) -> AssetDetailScreen:
        return self.asset_list().open_first_asset()

    def return_to_asset_list(self) -> AssetListScreen:
        """Back out of whatever form or detail screen is showing."""
        self.session.hide_keyboard()
        for form_cls in _FORMS:
            form = self.get(form_cls)
            if form.is_displayed(0):
                logger.info("Cleanup: cancelling %s", form.name)
                form.cancel()  # type: ignore[attr-defined]
                break
        task = self.get(TaskDetailsScreen)
        if task.is_displayed(0):
            task.back()
        detail = self.get(AssetDetailScreen)
        if detail.is_displayed(0):
            detail.scroll_to_top()
            detail.close()
        return self.asset_list()


@pytest.fixture
def screens(session: BaseSession, config: Config) -> Screens:
    return Screens(session, config)
