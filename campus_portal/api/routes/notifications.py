"""Notification Routes — the caller's own notifications only."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_current_actor
from campus_portal.core.domain_types import NotificationId
from campus_portal.core.errors import ErrorContext, ForbiddenError
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.models.notification import Notification
from campus_portal.schemas.notification import NotificationResponse
from campus_portal.services.notifications import get_notification_or_404

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _ensure_recipient(actor: Actor, notification: Notification) -> None:
    if notification.user_id != actor.subject_id:
        raise ForbiddenError(
            "Not authorized to access this notification",
            ErrorContext(subject_id=actor.subject_id, resource_id=str(notification.id)),
        )


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == actor.subject_id)
        .order_by(Notification.created_at.desc()),
    )
    return [NotificationResponse.model_validate(n) for n in result.scalars().all()]


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    notification = await get_notification_or_404(db, NotificationId(notification_id))
    _ensure_recipient(actor, notification)
    notification.read = True
    await db.commit()
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    notification = await get_notification_or_404(db, NotificationId(notification_id))
    _ensure_recipient(actor, notification)
    await db.delete(notification)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
