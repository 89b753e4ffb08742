"""Event Routes — CRUD, admin decisions, cancellation and attendance.

Invariants:
    - Reads are public; every mutation authenticates first
    - update/delete/cancel: creator OR admin (core.authorization)
    - approve/reject: ADMIN only, legal only from PENDING, one notification each
    - Mutations need a directory-backed caller (DENIED resolution -> 403)
    - join/leave: authenticated; join requires APPROVED
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_directory_actor, require_admin
from campus_portal.core.authorization import authorize_owner_or_admin
from campus_portal.core.domain_types import EventId, EventStatus
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.models.event import Event
from campus_portal.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
)
from campus_portal.services import events as event_service
from campus_portal.services.clubs import get_club_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventResponse])
async def list_events(
    status_filter: EventStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """List events ordered by date, optionally filtered by status."""
    query = select(Event).order_by(Event.date.asc())
    if status_filter is not None:
        query = query.where(Event.status == status_filter.value)
    result = await db.execute(query)
    return [EventResponse.from_model(e) for e in result.scalars().all()]


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    event = await event_service.get_event_or_404(db, EventId(event_id))
    return EventDetailResponse.from_model(event)


@router.post(
    "", response_model=EventResponse, status_code=status.HTTP_201_CREATED,
)
async def create_event(
    body: EventCreate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    """Create an event owned by the caller. New events start PENDING."""
    if body.club_id is not None:
        await get_club_or_404(db, body.club_id)
    event = Event(
        **body.model_dump(),
        status=EventStatus.PENDING.value,
        user_id=actor.subject_id,
    )
    db.add(event)
    await db.commit()
    logger.info(
        "Event created",
        extra={"event_id": str(event.id), "subject_id": actor.subject_id},
    )
    event = await event_service.get_event_or_404(db, EventId(event.id))
    return EventResponse.from_model(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    body: EventUpdate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.get_event_or_404(db, EventId(event_id))
    authorize_owner_or_admin(actor, event.user_id, "update", "event")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(event, field, value)
    await db.commit()
    event = await event_service.get_event_or_404(db, EventId(event_id))
    return EventResponse.from_model(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event and its attendee edges."""
    event = await event_service.get_event_or_404(db, EventId(event_id))
    authorize_owner_or_admin(actor, event.user_id, "delete", "event")
    await db.delete(event)
    await db.commit()
    logger.info(
        "Event deleted",
        extra={"event_id": str(event_id), "subject_id": actor.subject_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/approve", response_model=EventResponse)
async def approve_event(
    event_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.decide_event(db, EventId(event_id), EventStatus.APPROVED, actor)
    return EventResponse.from_model(event)


@router.post("/{event_id}/reject", response_model=EventResponse)
async def reject_event(
    event_id: UUID,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.decide_event(db, EventId(event_id), EventStatus.REJECTED, actor)
    return EventResponse.from_model(event)


@router.post("/{event_id}/cancel", response_model=EventResponse)
async def cancel_event(
    event_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    """Cancel an event (creator or admin). CANCELLED is terminal."""
    event = await event_service.get_event_or_404(db, EventId(event_id))
    authorize_owner_or_admin(actor, event.user_id, "cancel", "event")
    event = await event_service.cancel_event(db, event, actor)
    return EventResponse.from_model(event)


@router.post("/{event_id}/join", status_code=status.HTTP_201_CREATED)
async def join_event(
    event_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    await event_service.join_event(db, EventId(event_id), actor)
    return {"message": "Joined event successfully"}


@router.delete("/{event_id}/join", status_code=status.HTTP_204_NO_CONTENT)
async def leave_event(
    event_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    await event_service.leave_event(db, EventId(event_id), actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
