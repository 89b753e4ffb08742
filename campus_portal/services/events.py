"""Event Service — lifecycle transitions and attendance, orchestrated around core rules.

Invariants:
    - Status changes only through core.event_lifecycle.transition()
    - approve/reject write the status and exactly one Notification in one commit
    - join requires APPROVED status and is unique per (event, user)
    - leave without a prior join raises ResourceNotFoundError

Design Decisions:
    - Pre-check + unique constraint for joins: the check gives a clean 409,
      the constraint catches concurrent duplicates (IntegrityError -> ConflictError)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.core.domain_types import AttendeeStatus, EventId, EventStatus
from campus_portal.core.errors import (
    BusinessRuleError,
    ConflictError,
    ErrorContext,
    ResourceNotFoundError,
)
from campus_portal.core.event_lifecycle import decision_notice, transition
from campus_portal.core.identity import Actor
from campus_portal.models.event import Event, EventAttendee
from campus_portal.services.notifications import notify

logger = logging.getLogger(__name__)


async def get_event_or_404(db: AsyncSession, event_id: EventId) -> Event:
    """Load an event with creator and attendees, refreshing any cached instance."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True),
    )
    event = result.scalar_one_or_none()
    if event is None:
        raise ResourceNotFoundError("Event", str(event_id))
    return event


async def decide_event(
    db: AsyncSession, event_id: EventId, decision: EventStatus, actor: Actor,
) -> Event:
    """Approve or reject a PENDING event and notify its creator."""
    event = await get_event_or_404(db, event_id)
    ctx = ErrorContext(subject_id=actor.subject_id, resource_id=str(event_id))
    target = transition(EventStatus(event.status), decision, ctx)
    notice = decision_notice(event.title, target)

    event.status = target.value
    await notify(db, event.user_id, notice.message, notice.type)
    await db.commit()
    logger.info(
        f"Event {target.value.lower()}",
        extra={"event_id": str(event_id), "subject_id": actor.subject_id},
    )
    return await get_event_or_404(db, event_id)


async def cancel_event(db: AsyncSession, event: Event, actor: Actor) -> Event:
    """Move an event to CANCELLED (terminal)."""
    ctx = ErrorContext(subject_id=actor.subject_id, resource_id=str(event.id))
    target = transition(EventStatus(event.status), EventStatus.CANCELLED, ctx)
    event.status = target.value
    await db.commit()
    logger.info(
        "Event cancelled",
        extra={"event_id": str(event.id), "subject_id": actor.subject_id},
    )
    return await get_event_or_404(db, event.id)


async def _find_attendance(
    db: AsyncSession, event_id: EventId, user_id: str,
) -> EventAttendee | None:
    result = await db.execute(
        select(EventAttendee).where(
            EventAttendee.event_id == event_id,
            EventAttendee.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def join_event(db: AsyncSession, event_id: EventId, actor: Actor) -> EventAttendee:
    event = await get_event_or_404(db, event_id)
    if event.status != EventStatus.APPROVED.value:
        raise BusinessRuleError("Event is not approved yet", "EVENT_NOT_APPROVED")
    if await _find_attendance(db, event_id, actor.subject_id) is not None:
        raise ConflictError("Already joined this event", "ALREADY_JOINED")

    attendance = EventAttendee(
        event_id=event_id,
        user_id=actor.subject_id,
        status=AttendeeStatus.GOING.value,
    )
    db.add(attendance)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Already joined this event", "ALREADY_JOINED")
    return attendance


async def leave_event(db: AsyncSession, event_id: EventId, actor: Actor) -> None:
    await get_event_or_404(db, event_id)
    attendance = await _find_attendance(db, event_id, actor.subject_id)
    if attendance is None:
        raise ResourceNotFoundError("Event attendance", str(event_id))
    await db.delete(attendance)
    await db.commit()
