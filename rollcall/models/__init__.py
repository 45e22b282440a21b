"""Roll call data models."""

from rollcall.models.config import RosterConfig
from rollcall.models.history import CallRecord
from rollcall.models.loader import ImportStats, LineKind, ParsedLine
from rollcall.models.pools import PoolStatus
from rollcall.models.roster import Entity, GroupSummary

__all__ = [
    "CallRecord",
    "Entity",
    "GroupSummary",
    "ImportStats",
    "LineKind",
    "ParsedLine",
    "PoolStatus",
    "RosterConfig",
]
