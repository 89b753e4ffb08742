"""User ORM — the local directory record mirrored from the identity provider.

Invariants:
    - id is the identity-provider subject id (string PK, never generated here)
    - email is unique across the directory
    - role is one of Role (USER, MODERATOR, ADMIN); default USER

Design Decisions:
    - No back-populated relationships: directory rows are loaded alone on the
      hot auth path (role resolution runs on every authenticated request)
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from campus_portal.core.domain_types import Role
from campus_portal.db.base import Base


class User(Base):
    """Directory record — single source of truth for role."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Role.USER.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
