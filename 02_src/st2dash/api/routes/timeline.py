"""Timeline API routes: edge geometry and pan/zoom interaction."""

from dataclasses import asdict

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...session import Session
from ...timeline import TimelineLayout


class EdgeResponse(BaseModel):
    """Geometry and style of one edge."""

    x1: float
    y1: float
    x2: float
    y2: float
    label_x: float
    label_y: float
    color: str
    width: float
    dash: str
    opacity: float
    label: str
    tooltip: str


class TimelineResponse(BaseModel):
    """Rendered timeline."""

    domain: tuple[float, float] | None
    axis_y: float
    width: float
    k: float
    x: float
    edges: list[EdgeResponse]


class ZoomRequest(BaseModel):
    factor: float = Field(gt=0)
    anchor: float | None = None


class PanRequest(BaseModel):
    dx: float


class ResizeRequest(BaseModel):
    width: float = Field(gt=0)


def _layout_response(layout: TimelineLayout) -> dict:
    return {
        "domain": layout.domain,
        "axis_y": layout.axis_y,
        "width": layout.width,
        "k": layout.transform.k,
        "x": layout.transform.x,
        "edges": [asdict(edge) for edge in layout.edges],
    }


def create_timeline_router(session: Session) -> APIRouter:
    """Create timeline router."""
    router = APIRouter(prefix="/api/timeline", tags=["timeline"])

    @router.get("", response_model=TimelineResponse)
    async def get_timeline() -> dict:
        """Current edge geometry under the accumulated pan/zoom."""
        return _layout_response(session.timeline())

    @router.post("/zoom", response_model=TimelineResponse)
    async def zoom(request: ZoomRequest) -> dict:
        """Zoom around an anchor pixel (defaults to the viewport centre)."""
        session.mapper.zoom(request.factor, request.anchor)
        return _layout_response(session.timeline())

    @router.post("/pan", response_model=TimelineResponse)
    async def pan(request: PanRequest) -> dict:
        """Pan by dx pixels."""
        session.mapper.pan(request.dx)
        return _layout_response(session.timeline())

    @router.post("/resize", response_model=TimelineResponse)
    async def resize(request: ResizeRequest) -> dict:
        """Change the viewport width, keeping pan/zoom."""
        try:
            session.mapper.resize(request.width)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return _layout_response(session.timeline())

    @router.post("/reset", response_model=TimelineResponse)
    async def reset() -> dict:
        """Reset pan/zoom to identity."""
        session.mapper.reset()
        return _layout_response(session.timeline())

    return router
