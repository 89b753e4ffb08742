"""Campus Portal API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PortalError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and identity-provider client initialized on startup via lifespan
    - DashboardCache is created once per process and owned by app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_portal.api.error_handlers import register_error_handlers
from campus_portal.api.routes import (
    admin, auth, clubs, events, health, notifications, posts, users,
)
from campus_portal.config import get_settings
from campus_portal.core.dashboard_cache import DashboardCache
from campus_portal.infrastructure.database import init_db
from campus_portal.infrastructure.identity_provider import IdentityProviderClient
from campus_portal.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.identity_client = IdentityProviderClient(
        settings.identity_provider_url,
        api_key=settings.identity_provider_api_key,
        timeout_seconds=settings.identity_provider_timeout_seconds,
    )
    logger.info("Campus Portal API started")
    yield
    logger.info("Campus Portal API shutting down")
    await app.state.identity_client.aclose()
    await manager.dispose()


app = FastAPI(
    title="Campus Portal API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.state.dashboard_cache = DashboardCache(settings.dashboard_cache_ttl_seconds)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(clubs.router)
app.include_router(posts.router)
app.include_router(users.router)
app.include_router(notifications.router)
app.include_router(admin.router)

register_error_handlers(app)
