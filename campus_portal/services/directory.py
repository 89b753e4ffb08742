"""Directory Store — SQLAlchemy implementation of the DirectoryStore protocol.

Invariants:
    - insert_if_absent is idempotent on users.id (ON CONFLICT (id) DO NOTHING)
    - An email collision with a different id is NOT swallowed: it raises ConflictError
    - Every SQLAlchemy failure leaves the session rolled back and surfaces as DatabaseError

Design Decisions:
    - Dialect-specific insert (postgresql / sqlite): both support ON CONFLICT on the PK
"""

import logging

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.core.domain_types import SubjectId
from campus_portal.core.errors import ConflictError, DatabaseError, ErrorContext
from campus_portal.models.user import User

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlDirectoryStore:
    """DirectoryStore backed by the `users` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_role(self, subject_id: SubjectId) -> str | None:
        try:
            result = await self.db.execute(
                select(User.role).where(User.id == subject_id),
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(str(e.__class__.__name__), "role lookup")
        return result.scalar_one_or_none()

    async def insert_if_absent(
        self,
        subject_id: SubjectId,
        *,
        email: str,
        name: str,
        avatar: str | None,
        role: str,
    ) -> bool:
        dialect = self.db.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise DatabaseError(f"unsupported dialect {dialect}", "upsert")
        stmt = (
            insert(User)
            .values(id=subject_id, email=email, name=name, avatar=avatar, role=role)
            .on_conflict_do_nothing(index_elements=[User.id])
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                "This email is already registered", "EMAIL_TAKEN",
                ErrorContext(subject_id=subject_id),
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(str(e.__class__.__name__), "upsert")
        return result.rowcount == 1

    async def email_taken(self, email: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(User.email == email).limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def get(self, subject_id: SubjectId) -> User | None:
        result = await self.db.execute(select(User).where(User.id == subject_id))
        return result.scalar_one_or_none()
