"""Club Schemas — payloads for club CRUD, member edges and the club detail view."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from campus_portal.core.domain_types import ClubMemberRole, ClubStatus
from campus_portal.models.club import Club
from campus_portal.schemas.base import RequestModel, ResponseModel, UserRef
from campus_portal.schemas.event import EventResponse


class ClubCreate(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    content: str | None = Field(None, max_length=50_000)
    image: str | None = Field(None, max_length=2048)
    category: str | None = Field(None, max_length=100)


class ClubUpdate(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    content: str | None = Field(None, max_length=50_000)
    image: str | None = Field(None, max_length=2048)
    category: str | None = Field(None, max_length=100)
    status: ClubStatus | None = None


class MemberResponse(ResponseModel):
    user_id: str
    role: ClubMemberRole
    created_at: datetime
    user: UserRef


class ClubResponse(ResponseModel):
    id: UUID
    name: str
    description: str | None = None
    content: str | None = None
    image: str | None = None
    category: str | None = None
    status: ClubStatus
    user_id: str
    created_at: datetime
    updated_at: datetime
    created_by: UserRef
    member_count: int = 0

    @classmethod
    def from_model(cls, club: Club) -> "ClubResponse":
        response = cls.model_validate(club)
        response.member_count = len(club.members)
        return response


class ClubDetailResponse(ClubResponse):
    members: list[MemberResponse] = []
    events: list[EventResponse] = []
