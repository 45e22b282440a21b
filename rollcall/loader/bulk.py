"""
Bulk Loader: line-oriented roster import.

Each non-blank, non-comment line holds "identity<delimiter>group". A line with
no delimiter or with an empty field is counted as malformed and skipped; it
never aborts the rest of the import. Inserts are batched: pools are
invalidated once, after the last line.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from rollcall.models.config import RosterConfig
from rollcall.models.loader import ImportStats, LineKind, ParsedLine
from rollcall.roster.store import EntityStore

logger = logging.getLogger(__name__)


def parse_line(line: str, delimiter: str = ",", comment_prefix: str = "#") -> ParsedLine:
    """Classify one line of roster input."""
    text = line.strip()
    if not text or text.startswith(comment_prefix):
        return ParsedLine(kind=LineKind.SKIPPED)

    identity, sep, group = text.partition(delimiter)
    identity, group = identity.strip(), group.strip()
    if not sep or not identity or not group:
        return ParsedLine(kind=LineKind.MALFORMED)

    return ParsedLine(kind=LineKind.RECORD, identity=identity, group=group)


class BulkLoader:
    """Feeds parsed roster lines into the Entity Store."""

    def __init__(self, store: EntityStore, config: Optional[RosterConfig] = None):
        self._store = store
        self.config = config or RosterConfig()

    def load_lines(self, lines: Iterable[str]) -> ImportStats:
        """Import every line, then notify membership listeners once."""
        stats = ImportStats()
        try:
            for lineno, line in enumerate(lines, start=1):
                parsed = parse_line(line, self.config.delimiter, self.config.comment_prefix)
                if parsed.kind == LineKind.SKIPPED:
                    continue
                if parsed.kind == LineKind.MALFORMED:
                    logger.debug("Malformed roster line %d: %r", lineno, line.rstrip("\r\n"))
                    stats.malformed += 1
                    continue

                if self._store.insert(parsed.identity, parsed.group, notify=False):
                    stats.added += 1
                else:
                    stats.duplicates += 1
        finally:
            # Entities inserted before a failing line are still members.
            self._store.notify_membership_changed()
        logger.info(
            "Imported %d new, %d duplicates, %d malformed",
            stats.added, stats.duplicates, stats.malformed,
        )
        return stats

    def load_path(self, path: Union[str, Path]) -> Optional[ImportStats]:
        """
        Import a roster file.
        Returns None when the file cannot be opened, as opposed to the
        all-zero stats of an empty file.
        """
        try:
            handle = open(path, encoding=self.config.encoding, newline="")
        except OSError as exc:
            logger.warning("Cannot open roster %s: %s", path, exc)
            return None

        with handle:
            return self.load_lines(handle)
