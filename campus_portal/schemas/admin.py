"""Admin Schemas — aggregate dashboard payload."""

from campus_portal.schemas.base import ResponseModel
from campus_portal.schemas.event import EventResponse
from campus_portal.schemas.user import UserSummary


class DashboardStats(ResponseModel):
    user_count: int
    event_count: int
    club_count: int
    pending_events: int


class DashboardResponse(ResponseModel):
    stats: DashboardStats
    recent_users: list[UserSummary]
    recent_events: list[EventResponse]
