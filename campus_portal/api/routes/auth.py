"""Auth Routes — sign-up, sign-in, sign-out, session bootstrap and profile metadata.

Invariants:
    - Credentials are forwarded to the identity provider; nothing here stores them
    - Sign-up rejects an email already present in the directory (409)
    - Directory provisioning after sign-up and the /me name/avatar sync are
      best-effort: a failure is logged and the request still succeeds
    - /session reports the role from RoleResolver, never from token claims

Design Decisions:
    - The auth-state-change subscription stays client-side; the API only
      exposes request/response operations
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import (
    authenticate,
    bearer_token,
    get_current_actor,
    get_identity_client,
)
from campus_portal.core.domain_types import Role, SubjectId
from campus_portal.core.errors import ConflictError, PortalError
from campus_portal.core.identity import Actor, Identity
from campus_portal.core.role_resolution import default_display_name
from campus_portal.infrastructure.database import get_db
from campus_portal.infrastructure.identity_provider import IdentityProviderClient
from campus_portal.config import get_settings
from campus_portal.schemas.auth import (
    IdentityResponse,
    ProfileUpdate,
    SessionBootstrap,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
)
from campus_portal.schemas.user import UserResponse
from campus_portal.services.directory import SqlDirectoryStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED,
)
async def sign_up(
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db),
    client: IdentityProviderClient = Depends(get_identity_client),
):
    directory = SqlDirectoryStore(db)
    if await directory.email_taken(body.email):
        raise ConflictError("This email is already registered", "EMAIL_TAKEN")

    result = await client.sign_up(
        body.email, body.password,
        metadata={"name": body.name},
        redirect_to=get_settings().email_redirect_url,
    )
    # Auto-confirming providers answer with a session wrapping the user
    session = None
    user = result
    if "access_token" in result:
        session = SessionResponse.model_validate(result)
        user = result.get("user") or {}

    subject_id = user.get("id")
    if subject_id:
        try:
            await directory.insert_if_absent(
                SubjectId(subject_id),
                email=body.email,
                name=default_display_name(body.email, body.name),
                avatar=None,
                role=Role.USER.value,
            )
        except PortalError as e:
            logger.warning(
                f"Directory provisioning after sign-up failed: {e.message}",
                extra={"subject_id": subject_id, "error_code": e.code},
            )
    return SignUpResponse(
        user=user, session=session, email_confirmation_required=session is None,
    )


@router.post("/signin", response_model=SessionResponse)
async def sign_in(
    body: SignInRequest,
    client: IdentityProviderClient = Depends(get_identity_client),
):
    result = await client.sign_in_with_password(body.email, body.password)
    return SessionResponse.model_validate(result)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    token: str = Depends(bearer_token),
    client: IdentityProviderClient = Depends(get_identity_client),
):
    await client.sign_out(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/session", response_model=SessionBootstrap)
async def session_bootstrap(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Everything a client needs after login: identity, profile and role."""
    profile = await SqlDirectoryStore(db).get(actor.subject_id)
    identity = actor.identity
    return SessionBootstrap(
        identity=IdentityResponse(
            id=identity.subject_id,
            email=identity.email,
            email_verified=identity.email_verified,
        ),
        profile=UserResponse.model_validate(profile) if profile else None,
        role=actor.role,
        resolution=actor.resolution.outcome,
        is_admin=actor.is_admin,
        is_email_verified=identity.email_verified,
    )


@router.put("/me")
async def update_profile(
    body: ProfileUpdate,
    token: str = Depends(bearer_token),
    identity: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
    client: IdentityProviderClient = Depends(get_identity_client),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    user = await client.update_user_metadata(token, changes)

    directory = SqlDirectoryStore(db)
    try:
        record = await directory.get(identity.subject_id)
        if record is not None and changes:
            for field, value in changes.items():
                setattr(record, field, value)
            await db.commit()
    except (PortalError, SQLAlchemyError) as e:
        await db.rollback()
        logger.warning(
            f"Directory profile sync failed: {e}",
            extra={"subject_id": identity.subject_id},
        )
    return {"user": user}
