"""Authorization Decisions — pure role and ownership checks.

Invariants:
    - role_satisfies() follows ROLE_RANK (USER < MODERATOR < ADMIN)
    - Ownership is checked before role; the first path that succeeds is returned
    - Neither path succeeding raises ForbiddenError (never returns False)
"""

from enum import Enum

from campus_portal.core.domain_types import ROLE_RANK, Role
from campus_portal.core.errors import ErrorContext, ForbiddenError
from campus_portal.core.identity import Actor


class AuthorizationPath(str, Enum):
    """Which rule granted access."""
    OWNER = "owner"
    ROLE = "role"


def role_satisfies(role: Role, minimum: Role) -> bool:
    return ROLE_RANK[role] >= ROLE_RANK[minimum]


def ensure_role(actor: Actor, minimum: Role, message: str | None = None) -> AuthorizationPath:
    """Raise ForbiddenError unless actor's resolved role meets `minimum`."""
    if role_satisfies(actor.role, minimum):
        return AuthorizationPath.ROLE
    raise ForbiddenError(
        message or f"Forbidden: {minimum.value.capitalize()} access required",
        ErrorContext(subject_id=actor.subject_id),
    )


def authorize_owner_or_admin(
    actor: Actor, owner_id: str, action: str, resource: str,
) -> AuthorizationPath:
    """Allow the resource creator, otherwise require ADMIN."""
    if owner_id == actor.subject_id:
        return AuthorizationPath.OWNER
    if role_satisfies(actor.role, Role.ADMIN):
        return AuthorizationPath.ROLE
    raise ForbiddenError(
        f"Not authorized to {action} this {resource}",
        ErrorContext(subject_id=actor.subject_id),
    )
