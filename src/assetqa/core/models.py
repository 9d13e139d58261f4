"""assetqa data models — Pydantic v2.

This module is a leaf: no internal project imports.
All Enum and Model definitions live here.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================
# Enums
# ============================================================


class LocatorKind(StrEnum):
    """Element lookup strategy."""

    ACCESSIBILITY_ID = "accessibility_id"
    PREDICATE = "predicate"
    TEXT = "text"
    # Positional fallback only: layout is the most volatile part of a screen.
    CLASS_CHAIN = "class_chain"


class ScrollDirection(StrEnum):
    """Swipe gesture direction (content moves opposite to the finger)."""

    UP = "up"
    DOWN = "down"


class TestStatus(StrEnum):
    """Test case outcome status."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class ConnectionKind(StrEnum):
    """Connection direction offered by the Add Connection menu."""

    LINESIDE = "lineside"
    LOADSIDE = "loadside"


# ============================================================
# Config Models
# ============================================================


class AppiumConfig(BaseModel):
    """Automation session configuration (XCUITest)."""

    server_url: str = Field(default="http://127.0.0.1:4723")
    platform_name: str = Field(default="iOS")
    automation_name: str = Field(default="XCUITest")
    device_name: str = Field(default="iPhone Simulator")
    platform_version: str = Field(default="")
    udid: str = Field(default="", description="Device UDID (env: ASSETQA_APPIUM__UDID)")
    app_path: str = Field(default="", description="App bundle path (env: ASSETQA_APPIUM__APP_PATH)")
    bundle_id: str = Field(default="")
    no_reset: bool = Field(default=False)
    full_reset: bool = Field(default=False)
    new_command_timeout_s: int = Field(default=600, ge=10, le=3600)
    wda_local_port: int | None = Field(default=None, ge=1024, le=65535)
    auto_accept_alerts: bool = Field(default=True)


class CredentialsConfig(BaseModel):
    """Login data. Supplied by the environment, never hardcoded."""

    company_code: str = Field(default="")
    email: str = Field(default="")
    password: str = Field(default="", description="env: ASSETQA_CREDENTIALS__PASSWORD")
    site_name: str = Field(default="")


class WaitConfig(BaseModel):
    """Wait policy defaults."""

    timeout_ms: int = Field(default=10000, ge=0, le=120000)
    poll_interval_ms: int = Field(default=250, ge=10, le=10000)
    short_timeout_ms: int = Field(default=2000, ge=0, le=30000)
    max_scroll_attempts: int = Field(default=6, ge=1, le=50)


class ReportConfig(BaseModel):
    """Report and screenshot output."""

    reports_dir: str = Field(default="reports")
    screenshots_dir: str = Field(default="screenshots")
    screenshot_retention_days: int = Field(default=7, ge=0)
    reporters: list[str] = Field(default_factory=lambda: ["console", "markdown"])


class Config(BaseSettings):
    """Project configuration. Merged from YAML + env var + CLI flag."""

    model_config = SettingsConfigDict(
        env_prefix="ASSETQA_",
        env_nested_delimiter="__",
    )

    project_name: str = Field(default="assetqa")
    appium: AppiumConfig = Field(default_factory=AppiumConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    waits: WaitConfig = Field(default_factory=WaitConfig)
    reports: ReportConfig = Field(default_factory=ReportConfig)


# ============================================================
# Locator Model
# ============================================================


class LocatorSpec(BaseModel):
    """Immutable description of how to find an element.

    kind and value are validated by the resolver, not here, so that a
    malformed spec surfaces as InvalidLocator at lookup time.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    value: str
    visible_only: bool = Field(default=False)

    @classmethod
    def accessibility_id(cls, value: str, *, visible_only: bool = False) -> LocatorSpec:
        return cls(kind=LocatorKind.ACCESSIBILITY_ID, value=value, visible_only=visible_only)

    @classmethod
    def predicate(cls, value: str, *, visible_only: bool = False) -> LocatorSpec:
        return cls(kind=LocatorKind.PREDICATE, value=value, visible_only=visible_only)

    @classmethod
    def text(cls, value: str, *, visible_only: bool = False) -> LocatorSpec:
        return cls(kind=LocatorKind.TEXT, value=value, visible_only=visible_only)

    @classmethod
    def class_chain(cls, value: str, *, visible_only: bool = False) -> LocatorSpec:
        return cls(kind=LocatorKind.CLASS_CHAIN, value=value, visible_only=visible_only)

    def describe(self) -> str:
        """Short human-readable form for logs and error messages."""
        suffix = " [visible]" if self.visible_only else ""
        return f"{self.kind}={self.value!r}{suffix}"


class BoundingBox(BaseModel):
    """Element frame in screen points."""

    x: int = Field(default=0)
    y: int = Field(default=0)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    @property
    def center(self) -> tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)


# ============================================================
# Result Models
# ============================================================


class StepLogEntry(BaseModel):
    """One step recorded while a test runs."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    message: str
    screenshot: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


class TestOutcome(BaseModel):
    """Result of a single test case invocation."""

    __test__ = False

    name: str
    module: str = Field(default="")
    feature: str = Field(default="")
    status: TestStatus
    failure_reason: str | None = None
    duration_ms: float = Field(default=0.0, ge=0.0)
    screenshots: list[str] = Field(default_factory=list)
    steps: list[StepLogEntry] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASSED


class SuiteSummary(BaseModel):
    """Aggregate of all outcomes written by a reporter."""

    total: int = Field(ge=0)
    passed: int = Field(ge=0)
    failed: int = Field(ge=0)
    skipped: int = Field(ge=0)
    duration_ms: float = Field(ge=0.0)
    outcomes: list[TestOutcome] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
