"""
Roster Archive: durable snapshot of the roster and its call history.

Only the durable record is stored: entities (identity, group, call_count) and
call records. Pools and the current cycle are never written; a restored
roster always starts a fresh cycle.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Tuple

from rollcall.history.log import HistoryLog
from rollcall.roster.store import EntityStore

logger = logging.getLogger(__name__)


class RosterArchive:
    """
    sqlite-backed snapshot store.
    Each save replaces the previous snapshot in a single transaction.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        """Create the roster and history tables if they don't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS entities (
                position INTEGER PRIMARY KEY,
                identity TEXT NOT NULL UNIQUE,
                grp TEXT NOT NULL,
                call_count INTEGER NOT NULL DEFAULT 0
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS history (
                seq INTEGER PRIMARY KEY,
                identity TEXT NOT NULL,
                grp TEXT NOT NULL,
                called_at TEXT NOT NULL
            )
        """)
        self._conn.commit()

    def save(self, store: EntityStore, history: HistoryLog) -> Tuple[int, int]:
        """
        Replace the archived snapshot.

        Returns:
            (entities written, history records written)
        """
        entity_rows = [
            (position, e.identity, e.group, e.call_count)
            for position, e in enumerate(store)
        ]
        history_rows = [
            (seq, r.identity, r.group, r.timestamp.isoformat())
            for seq, r in enumerate(history)
        ]
        with self._conn:
            self._conn.execute("DELETE FROM entities")
            self._conn.execute("DELETE FROM history")
            self._conn.executemany(
                "INSERT INTO entities (position, identity, grp, call_count) VALUES (?, ?, ?, ?)",
                entity_rows,
            )
            self._conn.executemany(
                "INSERT INTO history (seq, identity, grp, called_at) VALUES (?, ?, ?, ?)",
                history_rows,
            )
        logger.info(
            "Archived %d entities and %d call records to %s",
            len(entity_rows), len(history_rows), self.db_path,
        )
        return len(entity_rows), len(history_rows)

    def restore(self, store: EntityStore, history: HistoryLog) -> Tuple[int, int]:
        """
        Load the archived snapshot into an empty store and log.

        Raises:
            ValueError: if the store or the history log already has content.
        """
        if len(store) or len(history):
            raise ValueError("restore requires an empty roster and history")

        entity_rows = self._conn.execute(
            "SELECT identity, grp, call_count FROM entities ORDER BY position"
        ).fetchall()
        for row in entity_rows:
            store.insert(row["identity"], row["grp"], notify=False, call_count=row["call_count"])

        history_rows = self._conn.execute(
            "SELECT identity, grp, called_at FROM history ORDER BY seq"
        ).fetchall()
        for row in history_rows:
            history.append(row["identity"], row["grp"], datetime.fromisoformat(row["called_at"]))

        store.notify_membership_changed()
        logger.info(
            "Restored %d entities and %d call records from %s",
            len(entity_rows), len(history_rows), self.db_path,
        )
        return len(entity_rows), len(history_rows)

    def count(self) -> int:
        """Number of archived entities."""
        row = self._conn.execute("SELECT COUNT(*) AS cnt FROM entities").fetchone()
        return row["cnt"]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
