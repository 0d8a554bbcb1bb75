"""Control API routes: epoch selection and view toggles."""

from pydantic import BaseModel, StrictBool, StrictFloat, StrictInt, StrictStr
from fastapi import APIRouter

from ...session import Session


class EpochRequest(BaseModel):
    """Raw epoch input as typed by the user. Validity is decided by the controller."""

    epoch: StrictStr | StrictInt | StrictFloat | StrictBool


class EpochResponse(BaseModel):
    """Whether the input was accepted, and the epoch now selected."""

    accepted: bool
    epoch: int


class ViewResponse(BaseModel):
    """Current view toggles."""

    show_waiting: bool
    split_worker: bool
    highlight: bool


class ViewUpdate(BaseModel):
    """Partial update of the view toggles."""

    show_waiting: bool | None = None
    split_worker: bool | None = None
    highlight: bool | None = None


def create_control_router(session: Session) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api", tags=["control"])

    @router.post("/epoch", response_model=EpochResponse)
    async def set_epoch(request: EpochRequest) -> dict:
        """Select an epoch. Invalid input leaves the previous epoch in place."""
        accepted = await session.set_epoch(request.epoch)
        return {"accepted": accepted, "epoch": session.controller.epoch}

    @router.get("/view", response_model=ViewResponse)
    async def get_view() -> dict:
        """Get view toggles."""
        view = session.view
        return {
            "show_waiting": view.show_waiting,
            "split_worker": view.split_worker,
            "highlight": view.highlight,
        }

    @router.put("/view", response_model=ViewResponse)
    async def update_view(update: ViewUpdate) -> dict:
        """Update view toggles."""
        view = session.update_view(**update.model_dump(exclude_none=True))
        return {
            "show_waiting": view.show_waiting,
            "split_worker": view.split_worker,
            "highlight": view.highlight,
        }

    return router
