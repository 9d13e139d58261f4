"""assetqa inspect — dump elements of the screen currently shown on the device."""

from __future__ import annotations

from pathlib import Path

import typer

from assetqa.core.config import load_config
from assetqa.core.exceptions import AssetQAError
from assetqa.core.models import LocatorKind, LocatorSpec
from assetqa.engine.appium import acquire_session, release_session
from assetqa.engine.base import BaseElement
from assetqa.engine.locator import LocatorResolver

# Every element the accessibility tree reports as visible.
VISIBLE_TREE = LocatorSpec.predicate("visible == 1")


def inspect_command(
    kind: LocatorKind | None = typer.Option(None, "--kind", "-k", help="Locator kind."),
    value: str | None = typer.Option(None, "--value", "-V", help="Locator value."),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
    screenshot: str | None = typer.Option(None, "--screenshot", "-s", help="Also save a PNG here."),
) -> None:
    """Print type/name/label/value/visibility of matching elements.

    Without a locator, lists every visible element. The app is left running
    (no reset) so the current screen can be inspected.
    """
    if (kind is None) != (value is None):
        typer.echo("Error: --kind and --value go together", err=True)
        raise typer.Exit(code=2)
    spec = VISIBLE_TREE if kind is None else LocatorSpec(kind=kind, value=value or "")

    try:
        cfg_path = Path(config_path) if config_path else None
        config = load_config(config_path=cfg_path, overrides={"appium": {"no_reset": True}})
        session = acquire_session(config.appium)
    except AssetQAError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    try:
        elements = LocatorResolver(session).resolve(spec)
        typer.echo(f"{spec.describe()}: {len(elements)} element(s)")
        for i, element in enumerate(elements, 1):
            typer.echo(f"{i:3d}. {describe_element(element)}")
        if screenshot:
            saved = session.save_screenshot(Path(screenshot))
            typer.echo(f"Screenshot: {saved}")
    except AssetQAError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None
    finally:
        release_session(session, terminate=False)


def describe_element(element: BaseElement) -> str:
    """One-line summary of an element's accessibility attributes."""
    parts = [element.element_type.removeprefix("XCUIElementType") or "?"]
    for attr in ("name", "label", "value"):
        text = element.attribute(attr)
        if text:
            parts.append(f"{attr}={text!r}")
    flags = []
    if element.is_displayed():
        flags.append("visible")
    if element.is_enabled():
        flags.append("enabled")
    if flags:
        parts.append(f"[{','.join(flags)}]")
    return " ".join(parts)
