"""Club Service — club creation with its founding member, membership edges, deletion.

Invariants:
    - create_club adds the creator as a ClubMember(role=ADMIN) in the same commit
    - join is unique per (club, user); duplicate -> ConflictError
    - leave without membership -> ResourceNotFoundError
    - delete_club removes member edges and detaches hosted events and posts
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.core.domain_types import ClubId, ClubMemberRole, EventStatus
from campus_portal.core.errors import ConflictError, ResourceNotFoundError
from campus_portal.core.identity import Actor
from campus_portal.models.club import Club, ClubMember
from campus_portal.models.event import Event
from campus_portal.models.post import Post
from campus_portal.schemas.club import ClubCreate

logger = logging.getLogger(__name__)


async def get_club_or_404(db: AsyncSession, club_id: ClubId) -> Club:
    result = await db.execute(
        select(Club)
        .where(Club.id == club_id)
        .execution_options(populate_existing=True),
    )
    club = result.scalar_one_or_none()
    if club is None:
        raise ResourceNotFoundError("Club", str(club_id))
    return club


async def approved_club_events(db: AsyncSession, club_id: ClubId) -> list[Event]:
    result = await db.execute(
        select(Event)
        .where(Event.club_id == club_id, Event.status == EventStatus.APPROVED.value)
        .order_by(Event.date.asc()),
    )
    return list(result.scalars().all())


async def create_club(db: AsyncSession, body: ClubCreate, actor: Actor) -> Club:
    club = Club(**body.model_dump(), user_id=actor.subject_id)
    db.add(club)
    await db.flush()
    db.add(ClubMember(
        club_id=club.id, user_id=actor.subject_id, role=ClubMemberRole.ADMIN.value,
    ))
    await db.commit()
    logger.info(
        "Club created",
        extra={"club_id": str(club.id), "subject_id": actor.subject_id},
    )
    return await get_club_or_404(db, club.id)


async def _find_membership(
    db: AsyncSession, club_id: ClubId, user_id: str,
) -> ClubMember | None:
    result = await db.execute(
        select(ClubMember).where(
            ClubMember.club_id == club_id, ClubMember.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def join_club(db: AsyncSession, club_id: ClubId, actor: Actor) -> ClubMember:
    await get_club_or_404(db, club_id)
    if await _find_membership(db, club_id, actor.subject_id) is not None:
        raise ConflictError("Already a member of this club", "ALREADY_MEMBER")

    membership = ClubMember(
        club_id=club_id, user_id=actor.subject_id, role=ClubMemberRole.MEMBER.value,
    )
    db.add(membership)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Already a member of this club", "ALREADY_MEMBER")
    return membership


async def leave_club(db: AsyncSession, club_id: ClubId, actor: Actor) -> None:
    await get_club_or_404(db, club_id)
    membership = await _find_membership(db, club_id, actor.subject_id)
    if membership is None:
        raise ResourceNotFoundError("Club membership", str(club_id))
    await db.delete(membership)
    await db.commit()


async def delete_club(db: AsyncSession, club: Club) -> None:
    await db.execute(
        update(Event).where(Event.club_id == club.id).values(club_id=None),
    )
    await db.execute(
        update(Post).where(Post.club_id == club.id).values(club_id=None),
    )
    await db.delete(club)
    await db.commit()
