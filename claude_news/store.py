"""
Snapshot storage.

The store owns the reference to the current snapshot. Snapshots are
immutable, so swapping the reference is the whole update: readers holding
the previous snapshot keep a consistent view, new readers see the new one.
Every replacement is followed by a full rewrite of the JSON file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .core.types import Snapshot
from .errors import PersistenceLoadError, PersistenceSaveError
from .logging_utils import log_event


logger = logging.getLogger(__name__)


class ArticleStore:
    """Holds the current snapshot and persists it as JSON.

    Attributes:
        path: Location of the snapshot file
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._snapshot = Snapshot()

    def current_snapshot(self) -> Snapshot:
        return self._snapshot

    def load(self) -> bool:
        """Load the persisted snapshot.

        Returns:
            True if a snapshot was loaded. On missing or corrupt data the
            store keeps an empty snapshot and returns False.
        """
        try:
            snapshot = self._read()
        except PersistenceLoadError as exc:
            log_event(
                logger,
                f"No usable snapshot at {self.path}: {exc}",
                level=logging.WARNING,
                event="snapshot_load_failed",
                path=str(self.path),
                error=str(exc),
            )
            self._snapshot = Snapshot()
            return False

        self._snapshot = snapshot
        log_event(
            logger,
            f"Loaded {snapshot.count} articles from disk",
            event="snapshot_loaded",
            path=str(self.path),
            count=snapshot.count,
        )
        return True

    def replace(self, snapshot: Snapshot) -> bool:
        """Swap in a new snapshot, then persist it.

        A failed write is logged and reported through the return value; the
        new snapshot is served either way.

        Returns:
            True if the snapshot was written to disk
        """
        self._snapshot = snapshot
        try:
            self._write(snapshot)
        except PersistenceSaveError as exc:
            log_event(
                logger,
                f"Save error: {exc}",
                level=logging.ERROR,
                event="snapshot_save_failed",
                path=str(self.path),
                error=str(exc),
            )
            return False

        log_event(
            logger,
            f"Saved {snapshot.count} articles to disk",
            event="snapshot_saved",
            path=str(self.path),
            count=snapshot.count,
        )
        return True

    @staticmethod
    def diff_new_count(old: Snapshot, new: Snapshot) -> int:
        """Number of article ids in ``new`` that are absent from ``old``."""
        old_ids = old.ids()
        return sum(1 for article_id in new.ids() if article_id not in old_ids)

    def _read(self) -> Snapshot:
        if not self.path.exists():
            raise PersistenceLoadError(f"{self.path} does not exist")
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("snapshot root is not an object")
            return Snapshot.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceLoadError(f"{type(exc).__name__}: {exc}") from exc

    def _write(self, snapshot: Snapshot) -> None:
        tmp = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceSaveError(f"{type(exc).__name__}: {exc}") from exc
