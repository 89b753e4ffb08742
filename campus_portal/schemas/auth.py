"""Auth Schemas — sign-up/sign-in payloads and the session bootstrap response.

Invariants:
    - Passwords are forwarded to the identity provider, never persisted or echoed
    - SessionBootstrap.is_admin is derived from the directory role only
"""

from typing import Any

from pydantic import EmailStr, Field

from campus_portal.core.domain_types import Role
from campus_portal.core.role_resolution import ResolutionOutcome
from campus_portal.schemas.base import RequestModel, ResponseModel
from campus_portal.schemas.user import UserResponse


class SignUpRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)
    name: str = Field(min_length=1, max_length=200)


class SignInRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)


class ProfileUpdate(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    avatar: str | None = Field(None, max_length=2048)


class IdentityResponse(ResponseModel):
    id: str
    email: str
    email_verified: bool


class SessionResponse(ResponseModel):
    """Identity-provider session, passed through to the client."""
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user: dict[str, Any] | None = None


class SignUpResponse(ResponseModel):
    user: dict[str, Any] | None = None
    session: SessionResponse | None = None
    email_confirmation_required: bool = True


class SessionBootstrap(ResponseModel):
    identity: IdentityResponse
    profile: UserResponse | None = None
    role: Role
    resolution: ResolutionOutcome
    is_admin: bool
    is_email_verified: bool
