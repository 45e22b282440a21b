"""
Roll Call API: FastAPI endpoints.

Exposes the roll call service via a REST API for:
- Roster management and bulk import
- Random calls, globally or per group
- Cycle reset and pool inspection
- Call history
- Archive snapshots
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from rollcall.models.config import RosterConfig
from rollcall.service.roll_call import RollCallService


# --- Request/Response Models ---

class EntityCreateRequest(BaseModel):
    identity: str = Field(min_length=1)
    group: str = Field(min_length=1)

    @field_validator("identity", "group", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class ImportFileRequest(BaseModel):
    path: str = Field(min_length=1)


class ImportLinesRequest(BaseModel):
    lines: List[str]


class DrawRequest(BaseModel):
    group: Optional[str] = None

    @field_validator("group")
    @classmethod
    def blank_group_is_global(cls, value):
        if value is not None and not value.strip():
            return None
        return value


# --- Application Factory ---

def create_app(
    service: Optional[RollCallService] = None,
    config: Optional[RosterConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Roll Call API",
        description="Fair random calling: nobody repeats until everyone has been called",
        version="0.1.0",
    )

    svc = service or RollCallService(config=config)
    app.state.service = svc

    # === ROSTER ===

    @app.post("/roster/entities")
    def add_entity(req: EntityCreateRequest):
        """Add one entity to the roster."""
        if not svc.add_entity(req.identity, req.group):
            raise HTTPException(409, f"Entity already exists: {req.identity}")
        return svc.get_entity(req.identity).model_dump()

    @app.get("/roster/entities")
    def list_entities():
        """Call statistics, most called first."""
        return [e.model_dump() for e in svc.statistics()]

    @app.get("/roster/groups")
    def list_groups():
        """Distinct groups with their sizes."""
        return [g.model_dump() for g in svc.groups()]

    @app.post("/roster/import")
    def import_file(req: ImportFileRequest):
        """Import a roster file readable by the server."""
        stats = svc.import_file(req.path)
        if stats is None:
            raise HTTPException(404, f"Roster file not found: {req.path}")
        return stats.model_dump()

    @app.post("/roster/import/lines")
    def import_lines(req: ImportLinesRequest):
        """Import roster lines sent in the request body."""
        return svc.import_lines(req.lines).model_dump()

    # === CALLS ===

    @app.post("/calls")
    def draw(req: Optional[DrawRequest] = None):
        """Call the next entity from the roster or from one group."""
        group = req.group if req else None
        entity = svc.draw(group)
        if entity is None:
            raise HTTPException(404, "No entity available")
        return entity.model_dump()

    @app.get("/calls/history")
    def get_history(limit: int = 0):
        """Recent calls, newest first. limit=0 returns all."""
        if limit < 0:
            raise HTTPException(422, "limit must be non-negative")
        return [r.model_dump(mode="json") for r in svc.history(limit)]

    @app.delete("/calls/history")
    def clear_history():
        """Forget call history. Counters and pools are kept."""
        svc.clear_history()
        return {"status": "cleared"}

    # === CYCLE ===

    @app.post("/cycle/reset")
    def reset_cycle():
        """Start a fresh cycle in every scope."""
        svc.reset_cycle()
        return {"status": "reset"}

    @app.get("/cycle/status")
    def cycle_status():
        """Roster size, call count and live pools."""
        return svc.status

    # === ARCHIVE ===

    @app.post("/archive/save")
    def save_archive():
        """Snapshot roster and history to the configured archive."""
        try:
            entities, records = svc.save_archive()
        except LookupError as exc:
            raise HTTPException(404, str(exc))
        return {"status": "saved", "entities": entities, "records": records}

    @app.post("/archive/restore")
    def restore_archive():
        """Replace roster and history with the archived snapshot."""
        try:
            entities, records = svc.restore_archive()
        except LookupError as exc:
            raise HTTPException(404, str(exc))
        return {"status": "restored", "entities": entities, "records": records}

    return app


# Default application instance
app = create_app()
