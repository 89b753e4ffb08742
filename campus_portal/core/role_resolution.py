"""Role Resolution Result — explicit outcome of looking up a subject's directory role.

Invariants:
    - Exactly three outcomes: FOUND, CREATED, DENIED
    - CREATED always carries Role.USER (lazy provisioning never grants privilege)
    - DENIED carries no role; effective_role degrades it to Role.USER (fail-closed)

Design Decisions:
    - Result type instead of nested try/except: the fail-closed default is a
      named branch (DENIED), not an accidental fallthrough
"""

from dataclasses import dataclass
from enum import Enum

from campus_portal.core.domain_types import Role


class ResolutionOutcome(str, Enum):
    FOUND = "found"
    CREATED = "created"
    DENIED = "denied"


@dataclass(frozen=True)
class RoleResolution:
    """Outcome of RoleResolver.resolve()."""
    outcome: ResolutionOutcome
    role: Role | None = None

    @classmethod
    def found(cls, role: Role) -> "RoleResolution":
        return cls(ResolutionOutcome.FOUND, role)

    @classmethod
    def created(cls) -> "RoleResolution":
        return cls(ResolutionOutcome.CREATED, Role.USER)

    @classmethod
    def denied(cls) -> "RoleResolution":
        return cls(ResolutionOutcome.DENIED, None)

    @property
    def effective_role(self) -> Role:
        """Role used for authorization decisions."""
        if self.outcome is ResolutionOutcome.DENIED or self.role is None:
            return Role.USER
        return self.role

    @property
    def is_admin(self) -> bool:
        return self.effective_role == Role.ADMIN


def parse_role(raw: str | None) -> Role | None:
    """Map a stored role string to Role. Unknown values yield None."""
    if raw is None:
        return None
    try:
        return Role(raw.upper())
    except ValueError:
        return None


def default_display_name(email: str, name: str | None = None) -> str:
    """Name for a lazily provisioned record: explicit name, else email local-part."""
    if name and name.strip():
        return name.strip()
    local = (email or "").split("@", 1)[0].strip()
    return local or "user"
