"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academia.api.errors import register_error_handlers
from academia.api.routes import academic_semesters, semester_registrations
from academia.config import Settings
from academia.logging import get_logger
from academia.records import Database
from academia.services import AcademicSemesterService, SemesterRegistrationService

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    # Startup
    db = Database(settings.db_path)
    db.create_tables()
    app.state.database = db
    app.state.semester_service = AcademicSemesterService(db, default_limit=settings.default_limit)
    app.state.registration_service = SemesterRegistrationService(
        db, default_limit=settings.default_limit
    )
    logger.info("Academia API started (env=%s, db=%s)", settings.env, settings.db_path)

    yield
    # Shutdown
    app.state.semester_service = None
    app.state.registration_service = None
    db.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to Settings.from_env().
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Academia API",
        description="REST API for academic semesters and semester registrations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, settings)

    app.include_router(academic_semesters.router, prefix="/api/v1")
    app.include_router(semester_registrations.router, prefix="/api/v1")

    return app
