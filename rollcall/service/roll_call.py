"""
Roll Call Service: the command surface every front end drives.

One method per operation:
  add_entity / import_lines / import_file / load_default_roster   (membership)
  draw / reset_cycle / clear_history                               (calling)
  statistics / groups / history / pool_status                      (reads)
  save_archive / restore_archive                                   (durability)

Draw-and-replenish is a read-modify-write on shared pool state, so every
operation runs under one exclusive lock.
"""

import logging
import random
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from rollcall.archive.store import RosterArchive
from rollcall.history.log import HistoryLog
from rollcall.loader.bulk import BulkLoader
from rollcall.models.config import RosterConfig
from rollcall.models.history import CallRecord
from rollcall.models.loader import ImportStats
from rollcall.models.pools import PoolStatus
from rollcall.models.roster import Entity, GroupSummary
from rollcall.pools.engine import PoolEngine
from rollcall.roster.store import EntityStore

logger = logging.getLogger(__name__)


class RollCallService:
    """
    Owns the roster, the pools and the call history.
    Strings passed in are trimmed and otherwise treated as opaque.
    """

    def __init__(
        self,
        config: Optional[RosterConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        archive: Optional[RosterArchive] = None,
    ):
        self.config = config or RosterConfig()
        self._rng = rng or random.Random(self.config.seed)
        self._clock = clock
        if archive is None and self.config.archive_path:
            archive = RosterArchive(self.config.archive_path)
        self.archive = archive
        self._lock = threading.Lock()
        self._install(*self._build())

    def _build(self) -> Tuple[EntityStore, HistoryLog, PoolEngine, BulkLoader]:
        """Wire a fresh, empty store, history log, pool engine and loader."""
        store = EntityStore()
        history_log = HistoryLog()
        engine = PoolEngine(store, history_log, rng=self._rng, clock=self._clock)
        return store, history_log, engine, BulkLoader(store, self.config)

    def _install(
        self,
        store: EntityStore,
        history_log: HistoryLog,
        engine: PoolEngine,
        loader: BulkLoader,
    ) -> None:
        self.store = store
        self.history_log = history_log
        self.engine = engine
        self.loader = loader

    # --- Membership ---

    def add_entity(self, identity: str, group: str) -> bool:
        """Add one entity. False if the identity is already on the roster."""
        identity, group = _clean(identity, "identity"), _clean(group, "group")
        with self._lock:
            added = self.store.insert(identity, group)
        if added:
            logger.info("Added %s to group %s", identity, group)
        return added

    def import_lines(self, lines) -> ImportStats:
        with self._lock:
            return self.loader.load_lines(lines)

    def import_file(self, path: Union[str, Path]) -> Optional[ImportStats]:
        """Import a roster file; None if it cannot be opened."""
        with self._lock:
            return self.loader.load_path(path)

    def load_default_roster(self) -> Optional[ImportStats]:
        return self.import_file(self.config.default_roster_path)

    # --- Calling ---

    def draw(self, group: Optional[str] = None) -> Optional[Entity]:
        """Draw from the whole roster, or from one group when given."""
        if group is not None:
            group = _clean(group, "group")
        with self._lock:
            return self.engine.draw(group)

    def reset_cycle(self) -> None:
        with self._lock:
            self.engine.reset()

    def clear_history(self) -> None:
        with self._lock:
            self.history_log.clear()

    # --- Reads ---

    def statistics(self) -> List[Entity]:
        """Entities by call count, highest first, ties by identity."""
        with self._lock:
            return [e.model_copy() for e in self.store.ranked()]

    def groups(self) -> List[GroupSummary]:
        with self._lock:
            return self.store.groups()

    def history(self, limit: Optional[int] = 0) -> List[CallRecord]:
        """Most recent calls first; limit 0 returns everything."""
        with self._lock:
            return list(self.history_log.query(limit))

    def get_entity(self, identity: str) -> Optional[Entity]:
        """Look up one entity by identity."""
        with self._lock:
            handle = self.store.handle_of(identity.strip())
            return None if handle is None else self.store.get(handle).model_copy()

    def pool_status(self) -> List[PoolStatus]:
        with self._lock:
            return self.engine.status()

    @property
    def status(self) -> dict:
        with self._lock:
            return {
                "entities": len(self.store),
                "groups": len(self.store.groups()),
                "calls": len(self.history_log),
                "pools": [p.model_dump() for p in self.engine.status()],
                "archive": self.archive.db_path if self.archive else None,
            }

    # --- Durability ---

    def save_archive(self) -> Tuple[int, int]:
        """Write the roster and history to the configured archive."""
        archive = self._require_archive()
        with self._lock:
            return archive.save(self.store, self.history_log)

    def restore_archive(self) -> Tuple[int, int]:
        """
        Replace the in-memory roster and history with the archived snapshot.
        The current roster is kept if the snapshot cannot be loaded.
        """
        archive = self._require_archive()
        with self._lock:
            components = self._build()
            counts = archive.restore(components[0], components[1])
            self._install(*components)
            return counts

    def _require_archive(self) -> RosterArchive:
        if self.archive is None:
            raise LookupError("No archive configured")
        return self.archive


def _clean(value: str, field: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{field} cannot be empty")
    return text
