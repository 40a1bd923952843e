# app/main.py
from fastapi import FastAPI

from app.api.routes import health, summaries, uploads
from app.core.config import get_settings
from app.core.logging_setup import configure_logging
from app.db.session import init_db


def create_app() -> FastAPI:
    """
    Application factory for the Attendance Upload Service.
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service that ingests batches of meeting attendance reports,\n"
            "rejects files that are not genuinely delimited text, and stores each\n"
            "batch atomically together with a per-attendant attendance summary."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(uploads.router)
    app.include_router(summaries.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db()

    return app


app = create_app()
