"""
VidTube FastAPI application factory.

Wires database, services, routers and exception handlers together.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from common.database import MongoDB
from common.utils import register_exception_handlers, success_response
from vidtube.auth.router import router as auth_router
from vidtube.config import Settings, settings as default_settings
from vidtube.dependencies import build_services
from vidtube.videos.router import router as videos_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The lifespan connects to MongoDB and builds the services; callers that
    provide their own `app.state.services` (tests) can skip it.
    """
    settings = settings or default_settings
    database = MongoDB()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting VidTube API...")
        settings.validate_required()

        await database.connect(
            uri=settings.MONGODB_URI,
            database_name=settings.MONGODB_DATABASE,
        )

        services = build_services(db=database.db, settings=settings)
        await services.credential_store.ensure_indexes()
        app.state.services = services
        logger.info("VidTube API started successfully")

        yield

        logger.info("Shutting down VidTube API...")
        await database.disconnect()
        logger.info("VidTube API shut down complete")

    app = FastAPI(
        title="VidTube API",
        description="Video platform backend: accounts, sessions and videos",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development() else None,
        redoc_url="/redoc" if settings.is_development() else None,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(videos_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        """Report API status and database connectivity."""
        return success_response({
            "status": "ok",
            "version": VERSION,
            "database": request.app.state.database.is_connected,
        })

    return app
