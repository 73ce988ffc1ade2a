"""FastAPI application exposing the floodrisk query session.

Layers are loaded in the application lifespan (unless disabled) and every
route reads the session's current snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from floodrisk.core.config import Settings
from floodrisk.session import HazardSession
from floodrisk.web.query_router import router as query_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session: HazardSession | None = None,
) -> FastAPI:
    """Build the API around a hazard session.

    Passing ``session`` lets callers (and tests) supply layers that are
    already loaded; otherwise a fresh session is built from ``settings``.

    Args:
        settings: Application settings. Defaults to Settings().
        session: Optional pre-built HazardSession.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = session.settings if session is not None else Settings()
    if session is None:
        session = HazardSession(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.load_on_startup:
            statuses = await session.load_all()
            failed = [status.service for status in statuses if not status.healthy]
            if failed:
                logger.warning("Started with unavailable layers: %s", ", ".join(failed))
        yield

    app = FastAPI(
        title="floodrisk",
        description="Flood zone, shelter and parcel value queries",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.hazard_session = session

    app.include_router(query_router)

    return app
