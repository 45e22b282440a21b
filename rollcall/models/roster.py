"""Roster models: the entities being called and their group listing."""

from pydantic import BaseModel, Field


class Entity(BaseModel):
    """A single member of the roster."""

    identity: str                           # Unique key, e.g. a student name
    group: str                              # Class, team or section
    call_count: int = Field(ge=0, default=0)


class GroupSummary(BaseModel):
    """One distinct group and how many entities belong to it."""

    group: str
    size: int = Field(ge=0)
