"""Post Schemas — payloads for post CRUD."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from campus_portal.schemas.base import RequestModel, ResponseModel, UserRef


class PostCreate(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=50_000)
    image: str | None = Field(None, max_length=2048)
    club_id: UUID | None = None


class PostUpdate(RequestModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=50_000)
    image: str | None = Field(None, max_length=2048)


class PostResponse(ResponseModel):
    id: UUID
    title: str
    content: str
    image: str | None = None
    user_id: str
    club_id: UUID | None = None
    created_at: datetime
    updated_at: datetime
    created_by: UserRef
