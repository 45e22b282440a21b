"""Tests for core data models and configuration."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from rollcall.models import (
    CallRecord,
    Entity,
    GroupSummary,
    ImportStats,
    PoolStatus,
    RosterConfig,
)


class TestEntity:
    def test_defaults(self):
        entity = Entity(identity="Alice", group="A1")
        assert entity.call_count == 0

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            Entity(identity="Alice", group="A1", call_count=-1)


class TestRecords:
    def test_call_record_serializes(self):
        record = CallRecord(identity="Alice", group="A1", timestamp=datetime(2024, 9, 2, 8, 0))
        assert record.model_dump(mode="json")["timestamp"] == "2024-09-02T08:00:00"

    def test_import_stats_defaults(self):
        assert ImportStats().model_dump() == {"added": 0, "duplicates": 0, "malformed": 0}

    def test_summaries(self):
        assert GroupSummary(group="A1", size=3).size == 3
        assert PoolStatus(remaining=2).scope is None


class TestRosterConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ROLLCALL_ROSTER", raising=False)
        monkeypatch.delenv("ROLLCALL_SEED", raising=False)
        config = RosterConfig()
        assert config.delimiter == ","
        assert config.comment_prefix == "#"
        assert config.default_roster_path == "roster.csv"
        assert config.seed is None
        assert config.archive_path is None

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("ROLLCALL_ROSTER", "/srv/class.csv")
        monkeypatch.setenv("ROLLCALL_SEED", "17")
        config = RosterConfig()
        assert config.default_roster_path == "/srv/class.csv"
        assert config.seed == 17

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("ROLLCALL_ROSTER", "/srv/class.csv")
        monkeypatch.setenv("ROLLCALL_SEED", "17")
        config = RosterConfig(default_roster_path="mine.csv", seed=3)
        assert config.default_roster_path == "mine.csv"
        assert config.seed == 3

    def test_bad_seed_env(self, monkeypatch):
        monkeypatch.setenv("ROLLCALL_SEED", "often")
        with pytest.raises(ValidationError):
            RosterConfig()

    @pytest.mark.parametrize("delimiter", ["", ";;", " "])
    def test_bad_delimiter(self, delimiter):
        with pytest.raises(ValidationError):
            RosterConfig(delimiter=delimiter)

    def test_bad_comment_prefix(self):
        with pytest.raises(ValidationError):
            RosterConfig(comment_prefix="")

    def test_bad_seed_env_hides_int_error(self, monkeypatch):
        monkeypatch.setenv("ROLLCALL_SEED", "often")
        with pytest.raises(ValidationError) as exc_info:
            RosterConfig()
        error = exc_info.value.errors()[0]["ctx"]["error"]
        assert "ROLLCALL_SEED" in str(error)
        assert error.__suppress_context__ is True
