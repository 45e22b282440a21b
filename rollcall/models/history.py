"""Call history record."""

from datetime import datetime

from pydantic import BaseModel


class CallRecord(BaseModel):
    """One successful draw, as it happened."""

    identity: str
    group: str
    timestamp: datetime
