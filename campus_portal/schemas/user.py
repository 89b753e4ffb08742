"""User Schemas — directory profile projections and the update payload.

Invariants:
    - email is never writable through the API (owned by the identity provider)
    - role is accepted here but only applied for ADMIN callers (enforced in the route)
"""

from datetime import datetime

from pydantic import Field

from campus_portal.core.domain_types import Role
from campus_portal.schemas.base import RequestModel, ResponseModel


class UserResponse(ResponseModel):
    id: str
    name: str
    email: str
    avatar: str | None = None
    role: Role
    created_at: datetime


class UserSummary(ResponseModel):
    """Dashboard projection — no role, no avatar."""
    id: str
    name: str
    email: str
    created_at: datetime


class UserUpdate(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    avatar: str | None = Field(None, max_length=2048)
    role: Role | None = None
