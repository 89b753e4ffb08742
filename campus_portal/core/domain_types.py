"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SubjectId is the identity-provider subject string; it is also the users.id PK
    - All valid states encoded as Enums, no raw string matching
    - Role ordering is USER < MODERATOR < ADMIN (ROLE_RANK)

Design Decisions:
    - str Enums: serialize to JSON and store in String columns without converters
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SubjectId = NewType("SubjectId", str)
EventId = NewType("EventId", UUID)
ClubId = NewType("ClubId", UUID)
PostId = NewType("PostId", UUID)
NotificationId = NewType("NotificationId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Directory role — the only privilege source for authorization."""
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


ROLE_RANK: dict[Role, int] = {
    Role.USER: 0,
    Role.MODERATOR: 1,
    Role.ADMIN: 2,
}


class EventStatus(str, Enum):
    """Event lifecycle states — maps to DB `status` column."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class ClubStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ClubMemberRole(str, Enum):
    """Role tag on a club membership edge (distinct from directory Role)."""
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class AttendeeStatus(str, Enum):
    GOING = "GOING"


class NotificationType(str, Enum):
    """Notification severity shown by the client."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


# ─── Constants ───────────────────────────────────────────────────

DASHBOARD_RECENT_LIMIT = 5
