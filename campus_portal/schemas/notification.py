"""Notification Schemas — read-only projection (notifications are system-generated)."""

from datetime import datetime
from uuid import UUID

from campus_portal.core.domain_types import NotificationType
from campus_portal.schemas.base import ResponseModel


class NotificationResponse(ResponseModel):
    id: UUID
    user_id: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime
