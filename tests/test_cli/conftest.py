"""CLI test isolation: run in tmp_path with no ASSETQA_ variables set."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("ASSETQA_"):
            monkeypatch.delenv(key, raising=False)
