"""Auth Dependencies — authenticate the bearer credential, resolve the role, gate by role.

Invariants:
    - authenticate() raises UnauthorizedError (401) for a missing/invalid/expired token
    - get_current_actor() resolves the directory role exactly once per request
    - get_directory_actor() refuses a DENIED resolution (403): writes reference
      users.id, so the caller must have a directory record
    - require_role(minimum) raises ForbiddenError (403) below `minimum`
    - Role never comes from token claims; only from RoleResolver

Design Decisions:
    - HTTPBearer(auto_error=False): missing credentials surface as our own 401
      envelope instead of FastAPI's default 403
    - Token verifier and IdP client are dependencies so tests can override them
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.config import get_settings
from campus_portal.core.authorization import ensure_role
from campus_portal.core.dashboard_cache import DashboardCache
from campus_portal.core.domain_types import Role
from campus_portal.core.errors import ErrorContext, ForbiddenError, UnauthorizedError
from campus_portal.core.identity import Actor, Identity
from campus_portal.core.role_resolution import ResolutionOutcome
from campus_portal.infrastructure.database import get_db
from campus_portal.infrastructure.identity_provider import (
    IdentityProviderClient,
    TokenVerifier,
)
from campus_portal.services.directory import SqlDirectoryStore
from campus_portal.services.role_resolver import RoleResolver

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def _default_verifier() -> TokenVerifier:
    settings = get_settings()
    return TokenVerifier(
        secret=settings.jwt_secret,
        algorithms=settings.jwt_algorithms,
        audience=settings.jwt_audience or None,
    )


def get_token_verifier() -> TokenVerifier:
    return _default_verifier()


def get_identity_client(request: Request) -> IdentityProviderClient:
    client = getattr(request.app.state, "identity_client", None)
    if client is None:
        raise RuntimeError("Identity provider client not initialized")
    return client


def get_dashboard_cache(request: Request) -> DashboardCache:
    return request.app.state.dashboard_cache


def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Unauthorized")
    return credentials.credentials


def authenticate(
    token: str = Depends(bearer_token),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    return verifier.verify(token)


async def get_current_actor(
    identity: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    resolution = await RoleResolver(SqlDirectoryStore(db)).resolve(identity)
    return Actor(identity=identity, resolution=resolution)


async def get_directory_actor(
    actor: Actor = Depends(get_current_actor),
) -> Actor:
    if actor.resolution.outcome is ResolutionOutcome.DENIED:
        raise ForbiddenError(
            "No directory profile for this account",
            ErrorContext(subject_id=actor.subject_id),
        )
    return actor


def require_role(minimum: Role) -> Callable[..., Awaitable[Actor]]:
    """Dependency factory: the current actor, if their role meets `minimum`."""

    async def _require(actor: Actor = Depends(get_current_actor)) -> Actor:
        ensure_role(actor, minimum)
        return actor

    return _require


require_admin = require_role(Role.ADMIN)
