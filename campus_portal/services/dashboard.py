"""Admin Dashboard — aggregate counts plus the most recent users and events.

Invariants:
    - Counts are exact at load time; cached copies may be stale up to the cache TTL
    - recent_* lists hold at most DASHBOARD_RECENT_LIMIT items, newest first
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.core.dashboard_cache import DashboardCache
from campus_portal.core.domain_types import DASHBOARD_RECENT_LIMIT, EventStatus
from campus_portal.models.club import Club
from campus_portal.models.event import Event
from campus_portal.models.user import User
from campus_portal.schemas.admin import DashboardResponse, DashboardStats
from campus_portal.schemas.event import EventResponse
from campus_portal.schemas.user import UserSummary


async def _count(db: AsyncSession, stmt) -> int:
    return int((await db.execute(stmt)).scalar_one())


async def load_dashboard(db: AsyncSession) -> DashboardResponse:
    stats = DashboardStats(
        user_count=await _count(db, select(func.count()).select_from(User)),
        event_count=await _count(db, select(func.count()).select_from(Event)),
        club_count=await _count(db, select(func.count()).select_from(Club)),
        pending_events=await _count(
            db,
            select(func.count()).select_from(Event)
            .where(Event.status == EventStatus.PENDING.value),
        ),
    )
    users = (await db.execute(
        select(User).order_by(User.created_at.desc()).limit(DASHBOARD_RECENT_LIMIT),
    )).scalars().all()
    events = (await db.execute(
        select(Event).order_by(Event.created_at.desc()).limit(DASHBOARD_RECENT_LIMIT),
    )).scalars().all()
    return DashboardResponse(
        stats=stats,
        recent_users=[UserSummary.model_validate(u) for u in users],
        recent_events=[EventResponse.from_model(e) for e in events],
    )


async def cached_dashboard(db: AsyncSession, cache: DashboardCache) -> DashboardResponse:
    return await cache.get_or_load(lambda: load_dashboard(db))
