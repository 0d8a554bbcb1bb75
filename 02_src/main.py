"""Main entry point for the ST2 dashboard."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from st2dash import Session, Settings
from st2dash.api import create_fastapi_app
from st2dash.logging_config import setup_logging


def main():
    """Run the dashboard API against the configured backend."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    settings = Settings.from_env()
    session = Session(settings)

    app = create_fastapi_app(session)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
