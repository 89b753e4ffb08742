"""Role Resolver — maps an authenticated identity to its directory role.

Invariants:
    - Anonymous callers resolve to DENIED
    - Missing record -> exactly one USER record provisioned, outcome CREATED
    - A token without an email is never provisioned (DENIED); users.email is unique
    - Concurrent provisioning races resolve to FOUND with the stored role
    - Any failure resolves to DENIED (never ADMIN) and is logged, never raised

Design Decisions:
    - The fail-closed branch is an explicit `except` returning RoleResolution.denied();
      callers cannot observe resolution errors, only the least-privilege outcome
"""

import logging

from campus_portal.core.domain_types import Role
from campus_portal.core.identity import Identity
from campus_portal.core.repository_protocols import DirectoryStore
from campus_portal.core.role_resolution import (
    RoleResolution,
    default_display_name,
    parse_role,
)

logger = logging.getLogger(__name__)


class RoleResolver:
    """Resolve (and lazily provision) the directory role for an identity."""

    def __init__(self, directory: DirectoryStore):
        self.directory = directory

    async def resolve(self, identity: Identity | None) -> RoleResolution:
        if identity is None:
            return RoleResolution.denied()
        try:
            return await self._resolve(identity)
        except Exception as e:
            logger.warning(
                f"Role resolution failed, defaulting to least privilege: {e}",
                extra={"subject_id": identity.subject_id, "resolution": "denied"},
            )
            return RoleResolution.denied()

    async def _resolve(self, identity: Identity) -> RoleResolution:
        stored = await self.directory.get_role(identity.subject_id)
        if stored is not None:
            return self._from_stored(identity, stored)

        if not identity.email:
            logger.warning(
                "Token carries no email, directory record not provisioned",
                extra={"subject_id": identity.subject_id, "resolution": "denied"},
            )
            return RoleResolution.denied()

        created = await self.directory.insert_if_absent(
            identity.subject_id,
            email=identity.email,
            name=default_display_name(identity.email, identity.display_name),
            avatar=identity.avatar,
            role=Role.USER.value,
        )
        if created:
            logger.info(
                "Provisioned directory record",
                extra={"subject_id": identity.subject_id, "resolution": "created"},
            )
            return RoleResolution.created()

        # Lost an insert race: another request created the row first.
        stored = await self.directory.get_role(identity.subject_id)
        if stored is None:
            return RoleResolution.denied()
        return self._from_stored(identity, stored)

    @staticmethod
    def _from_stored(identity: Identity, stored: str) -> RoleResolution:
        role = parse_role(stored)
        if role is None:
            logger.warning(
                f"Unknown stored role {stored!r}",
                extra={"subject_id": identity.subject_id, "resolution": "denied"},
            )
            return RoleResolution.denied()
        return RoleResolution.found(role)
