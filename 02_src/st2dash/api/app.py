"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..session import Session
from .routes import control, projections, status, timeline


def create_fastapi_app(session: Session | None = None, manage_session: bool = True) -> FastAPI:
    """Create and configure the FastAPI application around a dashboard session.

    Args:
        session: Session to serve. A new one is built from the environment if omitted.
        manage_session: Start/stop the session with the app lifespan.
    """
    session = session or Session()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_session:
            await session.start()
        yield
        if manage_session:
            await session.stop()

    fastapi_app = FastAPI(
        title="ST2 Dashboard API",
        description="Live projections of the ST2 tracing backend",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.session = session

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:5174"],  # Vite default
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(status.create_status_router(session))
    fastapi_app.include_router(control.create_control_router(session))
    fastapi_app.include_router(projections.create_projections_router(session))
    fastapi_app.include_router(timeline.create_timeline_router(session))

    return fastapi_app
