"""Projection API routes: chart tables and invariant logs."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder

from ...projections import PROJECTIONS
from ...session import Session


class ProjectionInfo(BaseModel):
    """A chart projection the renderer can request."""

    name: str
    title: str
    value_field: str


class ProjectionResponse(BaseModel):
    """Rows of one chart table."""

    name: str
    title: str
    value_field: str
    rows: list[dict[str, Any]]


class InvariantPanelResponse(BaseModel):
    """One rendered violation log."""

    kind: str
    title: str
    max_ms: str | None
    lines: list[str]
    text: str


def create_projections_router(session: Session) -> APIRouter:
    """Create projections router."""
    router = APIRouter(prefix="/api", tags=["projections"])

    @router.get("/projections", response_model=list[ProjectionInfo])
    async def list_projections() -> list[dict]:
        """List chart projections."""
        return [
            {"name": p.name, "title": p.title, "value_field": p.value_field}
            for p in PROJECTIONS.values()
        ]

    @router.get("/projections/{name}", response_model=ProjectionResponse)
    async def get_projection(name: str) -> dict:
        """Rows for one chart, under the current view toggles."""
        projection = PROJECTIONS.get(name)
        if projection is None:
            raise HTTPException(status_code=404, detail=f"Unknown projection: {name}")

        return {
            "name": projection.name,
            "title": projection.title,
            "value_field": projection.value_field,
            "rows": jsonable_encoder(session.project(name)),
        }

    @router.get("/invariants", response_model=list[InvariantPanelResponse])
    async def get_invariants() -> list[dict]:
        """Violation logs, longest first, with latched thresholds."""
        return [
            {
                "kind": panel.kind.value,
                "title": panel.title,
                "max_ms": panel.max_ms,
                "lines": panel.lines,
                "text": panel.text,
            }
            for panel in session.invariants()
        ]

    return router
