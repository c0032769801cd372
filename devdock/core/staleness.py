"""Per-key "last checked" bookkeeping backed by sentinel files.

Each key is a file inside the cache root and the file's modification time is
the moment the key was last checked. Files are never locked: two terminals
touching the same key simply race and the last writer wins.
"""
import hashlib
import os
import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, List, Optional

from devdock.core.logger import get_logger

logger = get_logger(__name__)


def project_cache_key(project_root: Path) -> str:
    """Return the staleness key for a project directory.

    The directory name keeps the key readable; the path digest keeps two
    checkouts with the same name apart.
    """
    resolved = str(Path(project_root).resolve())
    digest = hashlib.sha1(resolved.encode("utf-8")).hexdigest()[:12]
    name = "".join(c if c.isalnum() or c in "-_." else "_" for c in Path(resolved).name)
    return f"project-{name or 'root'}-{digest}"


class StalenessCache:
    """Decides whether a periodic refresh action is due."""

    def __init__(self, cache_root: Path, clock: Optional[Callable[[], float]] = None):
        """Initialize the cache.

        Args:
            cache_root: Directory holding one sentinel file per key
            clock: Returns the current time as epoch seconds (default: time.time)
        """
        self.cache_root = Path(cache_root)
        self._clock = clock or time.time

    def _entry(self, key: str) -> Path:
        if not key or "/" in key or key in {".", ".."}:
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.cache_root / key

    def last_checked(self, key: str) -> Optional[float]:
        """Return the key's timestamp, or None if it was never checked."""
        try:
            return self._entry(key).stat().st_mtime
        except FileNotFoundError:
            return None

    def is_stale(self, key: str, interval: timedelta) -> bool:
        """Return True if ``key`` was never checked or is older than ``interval``."""
        checked = self.last_checked(key)
        if checked is None:
            return True
        limit = self._clock() - interval.total_seconds()
        return checked < limit

    def mark_checked(self, key: str) -> None:
        """Record that ``key`` was checked now.

        The stored timestamp never moves backwards.
        """
        entry = self._entry(key)
        now = self._clock()
        checked = self.last_checked(key)
        if checked is not None and checked >= now:
            return

        self.cache_root.mkdir(parents=True, exist_ok=True)
        entry.touch(exist_ok=True)
        os.utime(entry, (now, now))
        logger.debug(f"Marked {key} checked")

    def prune(self, max_age: timedelta) -> List[str]:
        """Delete cache files strictly older than ``max_age``.

        Best effort: entries that cannot be removed are left in place.

        Returns:
            Names of the removed entries
        """
        if not self.cache_root.is_dir():
            return []

        limit = self._clock() - max_age.total_seconds()
        removed: List[str] = []
        for entry in self.cache_root.iterdir():
            try:
                if not entry.is_file() or entry.stat().st_mtime >= limit:
                    continue
                entry.unlink()
                removed.append(entry.name)
            except OSError as e:
                logger.debug(f"Could not prune {entry}: {e}")

        if removed:
            logger.debug(f"Pruned {len(removed)} cache entries")
        return removed
