"""Notification helpers — create and fetch per-user notifications.

Invariants:
    - notify() only stages the row; the caller owns the commit
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.core.domain_types import NotificationId, NotificationType
from campus_portal.core.errors import ResourceNotFoundError
from campus_portal.models.notification import Notification


async def notify(
    db: AsyncSession, user_id: str, message: str, type_: NotificationType,
) -> Notification:
    notification = Notification(user_id=user_id, message=message, type=type_.value)
    db.add(notification)
    return notification


async def get_notification_or_404(
    db: AsyncSession, notification_id: NotificationId,
) -> Notification:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id),
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise ResourceNotFoundError("Notification", str(notification_id))
    return notification
