# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Silver Edge
progress API.

Run with:
    uvicorn silveredge.api.app:create_app --factory
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from silveredge import __version__
from silveredge.api.errors import register_exception_handlers
from silveredge.api.routes import health
from silveredge.api.v1 import router as v1_router
from silveredge.core.config import get_settings
from silveredge.domains.gamification import (
    register_badge_triggers,
    unregister_badge_triggers,
)
from silveredge.infrastructure.database import (
    close_database,
    get_session,
    get_sessionmaker,
    init_database,
)
from silveredge.infrastructure.database.seeds import seed_badges
from silveredge.infrastructure.events import get_event_bus
from silveredge.utils.logging import bind_context, clear_context, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.
    Initializes and cleans up:
    - Logging
    - Database connections
    - Default badge catalog
    - Badge trigger subscriptions on the event bus

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Silver Edge progress API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    # Initialize database
    try:
        await init_database(settings)
        logger.info("Database connection initialized")
    except Exception as e:
        logger.warning("Failed to initialize database connection: %s", str(e))

    # Seed default badges
    if settings.gamification.seed_default_badges:
        try:
            async with get_session() as session:
                created = await seed_badges(session)
            logger.info("Badge catalog seeded (%d new badges)", len(created))
        except Exception as e:
            logger.warning("Failed to seed badges: %s", str(e))

    # Subscribe badge evaluation to student activity events
    event_bus = get_event_bus()
    badge_handler = None
    try:
        badge_handler = register_badge_triggers(event_bus, get_sessionmaker())
    except Exception as e:
        logger.warning("Failed to register badge triggers: %s", str(e))

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    if badge_handler is not None:
        unregister_badge_triggers(event_bus, badge_handler)

    try:
        await close_database()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down Silver Edge progress API")


async def _request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id to every log line emitted while handling a request."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    docs_enabled = settings.api.docs_enabled or settings.debug

    app = FastAPI(
        title=settings.api.title,
        description="Progress tracking and gamification for the Silver Edge LMS",
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.middleware("http")(_request_context)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
