"""Admin Routes — aggregate dashboard for ADMIN users.

Invariants:
    - ADMIN only (403 for everyone else, 401 for anonymous)
    - Served through the app-scoped DashboardCache (stale up to its TTL)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_dashboard_cache, require_admin
from campus_portal.core.dashboard_cache import DashboardCache
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.schemas.admin import DashboardResponse
from campus_portal.services.dashboard import cached_dashboard

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    _admin: Actor = Depends(require_admin),
    cache: DashboardCache = Depends(get_dashboard_cache),
    db: AsyncSession = Depends(get_db),
):
    return await cached_dashboard(db, cache)
