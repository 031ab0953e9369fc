"""NADI data layer — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from nadi.announcements.router import router as announcements_router
from nadi.closures.router import router as closures_router
from nadi.common.exceptions import register_exception_handlers
from nadi.common.rate_limit import create_limiter
from nadi.config import Settings, settings as default_settings
from nadi.container import Container, build_container
from nadi.events.router import router as events_router
from nadi.functions.router import build_router as build_functions_router
from nadi.inventory.router import router as inventory_router
from nadi.leave.router import router as leave_router
from nadi.notifications.router import router as notifications_router
from nadi.sites.router import router as sites_router
from nadi.staff.router import router as staff_router
from nadi.usergroups.router import router as user_groups_router

logger = logging.getLogger("nadi")

VERSION = "1.0.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the container on startup unless one was injected; close it on shutdown."""
    owned = getattr(app.state, "container", None) is None
    if owned:
        app.state.container = build_container(app.state.settings)
    container: Container = app.state.container
    await container.start()
    logger.info("NADI data layer started (data source: %s)", type(container.source).__name__)
    yield
    if owned:
        await container.close()


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or (container.settings if container else default_settings)
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="NADI Data Layer",
        description="Query/mutation API for HR, site, inventory and notification data",
        version=VERSION,
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    limiter = create_limiter()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": settings.ENVIRONMENT,
            "data_source": settings.DATA_SOURCE,
        }

    # Register routers
    app.include_router(closures_router, prefix="/api/v1", tags=["closures"])
    app.include_router(leave_router, prefix="/api/v1/leave", tags=["leave"])
    app.include_router(announcements_router, prefix="/api/v1/announcements", tags=["announcements"])
    app.include_router(staff_router, prefix="/api/v1/staff", tags=["staff"])
    app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["notifications"])
    app.include_router(inventory_router, prefix="/api/v1", tags=["inventory"])
    app.include_router(events_router, prefix="/api/v1/events", tags=["events"])
    app.include_router(sites_router, prefix="/api/v1/sites", tags=["sites"])
    app.include_router(user_groups_router, prefix="/api/v1/user-groups", tags=["user-groups"])
    app.include_router(
        build_functions_router(limiter, settings.FUNCTIONS_RATE_LIMIT),
        prefix="/functions/v1",
        tags=["functions"],
    )

    return app


app = create_app()
