"""Identity & Actor — who is calling, as seen by the authorization layer.

Invariants:
    - Identity is built from a verified token only; never from request bodies
    - Identity is immutable; Actor pairs it with the role resolved for this request
    - Privilege comes from the directory role alone (app_metadata is ignored)
"""

from dataclasses import dataclass, field
from typing import Any

from campus_portal.core.domain_types import Role, SubjectId
from campus_portal.core.role_resolution import RoleResolution


@dataclass(frozen=True)
class Identity:
    """Authenticated subject as asserted by the identity provider."""
    subject_id: SubjectId
    email: str
    email_verified: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str | None:
        name = self.metadata.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None

    @property
    def avatar(self) -> str | None:
        avatar = self.metadata.get("avatar")
        return avatar if isinstance(avatar, str) and avatar else None


@dataclass(frozen=True)
class Actor:
    """Authenticated caller with the role resolved for the current request."""
    identity: Identity
    resolution: RoleResolution

    @property
    def subject_id(self) -> SubjectId:
        return self.identity.subject_id

    @property
    def role(self) -> Role:
        return self.resolution.effective_role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
