"""Tests for the Bulk Loader."""

import random

import pytest

from rollcall.history.log import HistoryLog
from rollcall.loader.bulk import BulkLoader, parse_line
from rollcall.models.config import RosterConfig
from rollcall.models.loader import LineKind
from rollcall.pools.engine import PoolEngine
from rollcall.roster.store import EntityStore

SAMPLE_LINES = ["Alice, A1", "", "# comment", "Bob,B2", "Bob,B2", "bad-line", "  ,  "]


class TestParseLine:
    @pytest.mark.parametrize("line", ["", "   ", "\n", "# header", "   # indented comment"])
    def test_skipped(self, line):
        assert parse_line(line).kind == LineKind.SKIPPED

    @pytest.mark.parametrize("line", ["bad-line", "  ,  ", "Alice,", ",A1", "Alice,   "])
    def test_malformed(self, line):
        assert parse_line(line).kind == LineKind.MALFORMED

    def test_record_fields_are_trimmed(self):
        parsed = parse_line("  Alice Smith ,  Class 3B \r\n")
        assert parsed.kind == LineKind.RECORD
        assert parsed.identity == "Alice Smith"
        assert parsed.group == "Class 3B"

    def test_splits_on_first_delimiter_only(self):
        parsed = parse_line("Alice,A1,extra")
        assert parsed.identity == "Alice"
        assert parsed.group == "A1,extra"

    def test_custom_delimiter_and_comment(self):
        assert parse_line("Alice;A1", delimiter=";").group == "A1"
        assert parse_line("// note", comment_prefix="//").kind == LineKind.SKIPPED
        assert parse_line("Alice,A1", delimiter=";").kind == LineKind.MALFORMED


class TestBulkLoader:
    def setup_method(self):
        self.store = EntityStore()
        self.history = HistoryLog()
        self.engine = PoolEngine(self.store, self.history, rng=random.Random(1))
        self.loader = BulkLoader(self.store)

    def test_import_classification(self):
        stats = self.loader.load_lines(SAMPLE_LINES)

        assert (stats.added, stats.duplicates, stats.malformed) == (2, 1, 2)
        assert [(e.identity, e.group, e.call_count) for e in self.store] == [
            ("Alice", "A1", 0),
            ("Bob", "B2", 0),
        ]

    def test_existing_identity_counts_as_duplicate(self):
        self.store.insert("Alice", "Z9")
        stats = self.loader.load_lines(["Alice,A1"])
        assert stats.duplicates == 1
        assert self.store.get(0).group == "Z9"

    def test_empty_input_gives_zero_stats(self):
        stats = self.loader.load_lines([])
        assert (stats.added, stats.duplicates, stats.malformed) == (0, 0, 0)

    def test_import_invalidates_pools_once(self):
        notifications = []
        self.store.subscribe(lambda: notifications.append(1))
        self.store.insert("Zed", "A1", notify=False)
        self.store.insert("Yan", "A1", notify=False)
        self.engine.draw()
        self.engine.draw("A1")
        assert len(self.engine.status()) == 2

        self.loader.load_lines(["Alice,A1", "Bob,A1", "Carol,A2"])
        assert notifications == [1]
        assert self.engine.status() == []

    def test_imported_entities_join_current_cycle(self):
        self.loader.load_lines(["Alice,A1"])
        assert self.engine.draw().identity == "Alice"

        self.loader.load_lines(["Bob,A1"])
        drawn = {self.engine.draw().identity, self.engine.draw().identity}
        assert drawn == {"Alice", "Bob"}

    def test_load_path(self, tmp_path):
        roster = tmp_path / "roster.csv"
        roster.write_text("\ufeffAlice,A1\r\nBob,A2\r\n# done\r\n", encoding="utf-8")

        stats = self.loader.load_path(roster)
        assert stats.added == 2
        assert stats.malformed == 0
        assert "Alice" in self.store

    def test_load_path_empty_file(self, tmp_path):
        roster = tmp_path / "empty.csv"
        roster.write_text("", encoding="utf-8")

        stats = self.loader.load_path(roster)
        assert stats is not None
        assert (stats.added, stats.duplicates, stats.malformed) == (0, 0, 0)

    def test_load_path_missing_file(self, tmp_path):
        assert self.loader.load_path(tmp_path / "missing.csv") is None
        assert self.loader.load_path(tmp_path) is None
        assert len(self.store) == 0

    def test_failing_source_still_invalidates_pools(self):
        self.store.insert("Alice", "A1")
        self.store.insert("Bob", "A1")
        self.engine.draw()

        def _source():
            yield "Carol,A1"
            raise OSError("connection lost")

        with pytest.raises(OSError):
            self.loader.load_lines(_source())

        assert "Carol" in self.store
        assert self.engine.status() == []
        drawn = {self.engine.draw().identity for _ in range(3)}
        assert drawn == {"Alice", "Bob", "Carol"}

    def test_configured_delimiter(self):
        loader = BulkLoader(self.store, RosterConfig(delimiter=";"))
        stats = loader.load_lines(["Alice;A1", "Bob,A1"])
        assert (stats.added, stats.malformed) == (1, 1)
