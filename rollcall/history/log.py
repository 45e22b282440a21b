"""
History Log: append-only record of every successful draw.

Behavioral Contract:
- Records are kept in the order they were appended.
- Nothing references a record by position, so clear() is always safe.
- Independent of pools and counters: clearing history touches neither.
"""

import logging
from datetime import datetime
from itertools import islice
from typing import Iterator, List, Optional

from rollcall.models.history import CallRecord

logger = logging.getLogger(__name__)


class RecentCalls:
    """
    Lazy newest-first view over a history log.
    Each iteration starts again from the most recent record.
    """

    def __init__(self, records: List[CallRecord], limit: Optional[int] = None):
        self._records = records
        self._limit = limit or None

    def __iter__(self) -> Iterator[CallRecord]:
        return islice(reversed(self._records), self._limit)

    def __len__(self) -> int:
        if self._limit is None:
            return len(self._records)
        return min(self._limit, len(self._records))


class HistoryLog:
    """In-memory call history."""

    def __init__(self):
        self._records: List[CallRecord] = []

    def append(
        self,
        identity: str,
        group: str,
        timestamp: Optional[datetime] = None,
    ) -> CallRecord:
        """Record one draw. Timestamp defaults to now (local time)."""
        record = CallRecord(
            identity=identity,
            group=group,
            timestamp=timestamp or datetime.now(),
        )
        self._records.append(record)
        return record

    def query(self, limit: Optional[int] = 0) -> RecentCalls:
        """The limit most recent records, newest first. 0 or None means all."""
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return RecentCalls(self._records, limit)

    def clear(self) -> None:
        """Drop every record. Call counters are not affected."""
        dropped = len(self._records)
        self._records.clear()
        logger.info("Cleared %d history records", dropped)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
