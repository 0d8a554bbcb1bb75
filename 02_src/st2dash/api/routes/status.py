"""Observability API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter

from ...session import Session


class FrameStatsResponse(BaseModel):
    """Delivery counters for one frame type."""

    received: int
    entries: int
    last_received: datetime | None


class StatusResponse(BaseModel):
    """Response model for session status."""

    backend_url: str
    connected: bool
    closed: bool
    connect_count: int
    epoch: int
    frames: dict[str, FrameStatsResponse]
    dropped: dict[str, int]
    store_sizes: dict[str, int]


def create_status_router(session: Session) -> APIRouter:
    """Create status router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> dict:
        """Connection state, selected epoch and frame counters."""
        snapshot = session.tracker.snapshot()
        stores = session.stores
        invariants = stores.invariants.snapshot

        return {
            "backend_url": session.channel.url,
            "connected": session.channel.connected,
            "closed": session.channel.closed,
            "connect_count": session.channel.connect_count,
            "epoch": session.controller.epoch,
            "frames": {
                frame_type.value: {
                    "received": stats.received,
                    "entries": stats.entries,
                    "last_received": stats.last_received,
                }
                for frame_type, stats in snapshot.frames.items()
            },
            "dropped": snapshot.dropped,
            "store_sizes": {
                "activity": len(stores.activity.snapshot),
                "aggregates": len(stores.aggregates.snapshot),
                "metrics": len(stores.metrics.snapshot),
                "highlights": len(stores.highlights),
                "invariants": sum(len(log) for log in invariants.logs.values()),
            },
        }

    return router
