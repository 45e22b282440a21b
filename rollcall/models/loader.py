"""Bulk import results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ImportStats(BaseModel):
    """Counts produced by one bulk load. Never persisted."""

    added: int = Field(ge=0, default=0)
    duplicates: int = Field(ge=0, default=0)
    malformed: int = Field(ge=0, default=0)


class LineKind(str, Enum):
    """Classification of one input line."""

    SKIPPED = "skipped"          # Blank or comment
    MALFORMED = "malformed"
    RECORD = "record"


class ParsedLine(BaseModel):
    """Result of parsing one line of roster input."""

    kind: LineKind
    identity: Optional[str] = None
    group: Optional[str] = None
