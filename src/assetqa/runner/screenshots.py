"""ScreenshotStore — timestamped PNG files under the screenshots directory."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetqa.engine.base import BaseSession

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize(label: str, max_length: int = 80) -> str:
    """Make label usable as a file name."""
    cleaned = _UNSAFE.sub("_", label).strip("._")
    return cleaned[:max_length] or "screenshot"


class ScreenshotStore:
    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, session: BaseSession, label: str) -> Path:
        """Capture the current screen to <directory>/<timestamp>_<label>.png."""
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        path = self._directory / f"{stamp}_{sanitize(label)}.png"
        session.save_screenshot(path)
        logger.debug("Screenshot saved: %s", path)
        return path

    def cleanup_older_than(self, days: int) -> int:
        """Delete PNGs older than days. Returns how many were removed."""
        if not self._directory.is_dir():
            return 0
        cutoff = time.time() - days * 86400
        removed = 0
        for path in self._directory.glob("*.png"):
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        if removed:
            logger.info("Removed %d screenshot(s) older than %d day(s)", removed, days)
        return removed
