"""Roll call configuration."""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RosterConfig(BaseModel):
    """Configuration for parsing rosters and seeding the pool engine."""

    delimiter: str = ","
    comment_prefix: str = "#"
    encoding: str = "utf-8-sig"
    seed: Optional[int] = Field(
        default=None,
        description="Fixed RNG seed. None seeds from OS entropy once at startup.",
    )
    default_roster_path: Optional[str] = Field(
        default=None,
        description="Roster loaded at startup. Falls back to ROLLCALL_ROSTER, then roster.csv.",
    )
    archive_path: Optional[str] = Field(
        default=None,
        description="sqlite database for roster snapshots. None disables archiving.",
    )

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, value: str) -> str:
        if len(value) != 1 or value.isspace():
            raise ValueError("delimiter must be a single non-whitespace character")
        return value

    @field_validator("comment_prefix")
    @classmethod
    def validate_comment_prefix(cls, value: str) -> str:
        if not value or value != value.strip():
            raise ValueError("comment_prefix must be non-empty and contain no surrounding whitespace")
        return value

    @model_validator(mode="after")
    def resolve_environment(self) -> "RosterConfig":
        """Fill roster path and seed from ROLLCALL_ROSTER / ROLLCALL_SEED when not given."""
        if self.default_roster_path is None:
            env_path = os.environ.get("ROLLCALL_ROSTER", "").strip()
            object.__setattr__(self, "default_roster_path", env_path or "roster.csv")
        if self.seed is None:
            env_seed = os.environ.get("ROLLCALL_SEED", "").strip()
            if env_seed:
                try:
                    object.__setattr__(self, "seed", int(env_seed))
                except ValueError:
                    raise ValueError(f"ROLLCALL_SEED must be an integer, got {env_seed!r}") from None
        return self
