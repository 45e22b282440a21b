"""Pool inspection model."""

from typing import Optional

from pydantic import BaseModel, Field


class PoolStatus(BaseModel):
    """How many entities are still uncalled in one scope's current cycle."""

    scope: Optional[str] = None             # None is the global scope
    remaining: int = Field(ge=0)
