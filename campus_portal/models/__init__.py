"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is keyed by the identity-provider subject id (string PK)
    - Membership edges are unique per (entity, user)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from campus_portal.models.user import User  # noqa: F401
from campus_portal.models.club import Club, ClubMember  # noqa: F401
from campus_portal.models.event import Event, EventAttendee  # noqa: F401
from campus_portal.models.notification import Notification  # noqa: F401
from campus_portal.models.post import Post  # noqa: F401
