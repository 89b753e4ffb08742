"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Implementations provided by shell via dependency injection
    - Store implementations map driver exceptions to core DatabaseError / ConflictError

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass in-memory fakes
"""

from typing import Protocol

from campus_portal.core.domain_types import SubjectId


class DirectoryStore(Protocol):
    """Contract for user-directory persistence used by role resolution."""

    async def get_role(self, subject_id: SubjectId) -> str | None:
        """Stored role string, or None when no record exists."""
        ...

    async def insert_if_absent(
        self,
        subject_id: SubjectId,
        *,
        email: str,
        name: str,
        avatar: str | None,
        role: str,
    ) -> bool:
        """Insert keyed on id; True if this call created the row."""
        ...

    async def email_taken(self, email: str) -> bool: ...
