"""Event Schemas — payloads for event CRUD and the embedded attendee list.

Invariants:
    - EventCreate/EventUpdate never carry status (status changes go through
      approve/reject/cancel)
    - attendee_count is derived from the loaded attendee edges
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from campus_portal.core.domain_types import EventStatus
from campus_portal.models.event import Event
from campus_portal.schemas.base import RequestModel, ResponseModel, UserRef


class EventCreate(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    content: str | None = Field(None, max_length=50_000)
    date: datetime
    location: str | None = Field(None, max_length=300)
    image: str | None = Field(None, max_length=2048)
    category: str | None = Field(None, max_length=100)
    club_id: UUID | None = None


class EventUpdate(RequestModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    content: str | None = Field(None, max_length=50_000)
    date: datetime | None = None
    location: str | None = Field(None, max_length=300)
    image: str | None = Field(None, max_length=2048)
    category: str | None = Field(None, max_length=100)


class AttendeeResponse(ResponseModel):
    user_id: str
    status: str
    created_at: datetime
    user: UserRef


class EventResponse(ResponseModel):
    id: UUID
    title: str
    description: str | None = None
    content: str | None = None
    date: datetime
    location: str | None = None
    image: str | None = None
    category: str | None = None
    status: EventStatus
    user_id: str
    club_id: UUID | None = None
    created_at: datetime
    updated_at: datetime
    created_by: UserRef
    attendee_count: int = 0

    @classmethod
    def from_model(cls, event: Event) -> "EventResponse":
        response = cls.model_validate(event)
        response.attendee_count = len(event.attendees)
        return response


class EventDetailResponse(EventResponse):
    attendees: list[AttendeeResponse] = []
