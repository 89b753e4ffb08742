"""Club Routes — CRUD and membership.

Invariants:
    - Reads are public; every mutation authenticates first
    - Creator becomes a club ADMIN member on creation
    - update/delete: creator OR admin
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_directory_actor
from campus_portal.core.authorization import authorize_owner_or_admin
from campus_portal.core.domain_types import ClubId, ClubStatus
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.models.club import Club
from campus_portal.schemas.club import (
    ClubCreate,
    ClubDetailResponse,
    ClubResponse,
    ClubUpdate,
)
from campus_portal.schemas.event import EventResponse
from campus_portal.services import clubs as club_service

router = APIRouter(prefix="/api/clubs", tags=["clubs"])


@router.get("", response_model=list[ClubResponse])
async def list_clubs(
    status_filter: ClubStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    query = select(Club).order_by(Club.name.asc())
    if status_filter is not None:
        query = query.where(Club.status == status_filter.value)
    result = await db.execute(query)
    return [ClubResponse.from_model(c) for c in result.scalars().all()]


@router.get("/{club_id}", response_model=ClubDetailResponse)
async def get_club(club_id: UUID, db: AsyncSession = Depends(get_db)):
    """Club with members and its APPROVED events."""
    club = await club_service.get_club_or_404(db, ClubId(club_id))
    events = await club_service.approved_club_events(db, ClubId(club_id))
    detail = ClubDetailResponse.from_model(club)
    detail.events = [EventResponse.from_model(e) for e in events]
    return detail


@router.post(
    "", response_model=ClubResponse, status_code=status.HTTP_201_CREATED,
)
async def create_club(
    body: ClubCreate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    club = await club_service.create_club(db, body, actor)
    return ClubResponse.from_model(club)


@router.put("/{club_id}", response_model=ClubResponse)
async def update_club(
    club_id: UUID,
    body: ClubUpdate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    club = await club_service.get_club_or_404(db, ClubId(club_id))
    authorize_owner_or_admin(actor, club.user_id, "update", "club")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(club, field, value.value if isinstance(value, ClubStatus) else value)
    await db.commit()
    club = await club_service.get_club_or_404(db, ClubId(club_id))
    return ClubResponse.from_model(club)


@router.delete("/{club_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_club(
    club_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    club = await club_service.get_club_or_404(db, ClubId(club_id))
    authorize_owner_or_admin(actor, club.user_id, "delete", "club")
    await club_service.delete_club(db, club)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{club_id}/join", status_code=status.HTTP_201_CREATED)
async def join_club(
    club_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    await club_service.join_club(db, ClubId(club_id), actor)
    return {"message": "Joined club successfully"}


@router.delete("/{club_id}/join", status_code=status.HTTP_204_NO_CONTENT)
async def leave_club(
    club_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    await club_service.leave_club(db, ClubId(club_id), actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
