"""Housekeeping for the temporary upload directory."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


def cleanup_folder(folder: Path, max_age_minutes: int) -> int:
    """Deletes files older than ``max_age_minutes`` (all files for 0) and returns the count."""
    if not folder.is_dir():
        return 0

    removed = 0
    cutoff = datetime.now(timezone.utc) - timedelta(minutes=max_age_minutes)
    for entry in folder.iterdir():
        if entry.is_symlink() or not entry.is_file():
            continue
        if max_age_minutes > 0:
            mtime = datetime.fromtimestamp(entry.stat().st_mtime, tz=timezone.utc)
            if mtime > cutoff:
                continue
        try:
            entry.unlink()
        except OSError as exc:
            logger.debug("Could not remove %s: %s", entry, exc)
            continue
        removed += 1

    if removed:
        logger.info("Removed %d stale file(s) from %s", removed, folder)
    return removed
