"""Role Resolver — verifies lookup, lazy provisioning and fail-closed behavior.

Invariants:
    - Existing record -> FOUND with the stored role
    - Missing record -> exactly one USER record, CREATED
    - Lost insert race -> FOUND with whatever the winner stored
    - Any store failure -> DENIED (effective USER), never raised
"""

from sqlalchemy import func, select

from campus_portal.core.domain_types import Role, SubjectId
from campus_portal.core.identity import Identity
from campus_portal.core.role_resolution import ResolutionOutcome
from campus_portal.models.user import User
from campus_portal.services.directory import SqlDirectoryStore
from campus_portal.services.role_resolver import RoleResolver


def _identity(sub="subj-1", email="subj1@campus.edu", **metadata) -> Identity:
    return Identity(subject_id=SubjectId(sub), email=email, metadata=metadata)


class FakeDirectory:
    def __init__(self, roles=None, fail=False):
        self.roles = dict(roles or {})
        self.fail = fail
        self.inserts = []

    async def get_role(self, subject_id):
        if self.fail:
            raise RuntimeError("directory unreachable")
        return self.roles.get(subject_id)

    async def insert_if_absent(self, subject_id, *, email, name, avatar, role):
        self.inserts.append({"id": subject_id, "email": email, "name": name, "role": role})
        if subject_id in self.roles:
            return False
        self.roles[subject_id] = role
        return True

    async def email_taken(self, email):
        return False


class RacingDirectory(FakeDirectory):
    """First lookup misses, insert loses the race, second lookup sees the winner."""

    def __init__(self, winner_role):
        super().__init__()
        self.winner_role = winner_role
        self.lookups = 0

    async def get_role(self, subject_id):
        self.lookups += 1
        return None if self.lookups == 1 else self.winner_role

    async def insert_if_absent(self, subject_id, **kwargs):
        return False


async def test_anonymous_is_denied():
    resolution = await RoleResolver(FakeDirectory()).resolve(None)
    assert resolution.outcome == ResolutionOutcome.DENIED
    assert resolution.effective_role == Role.USER


async def test_existing_record_is_found():
    directory = FakeDirectory({"subj-1": "ADMIN"})
    resolution = await RoleResolver(directory).resolve(_identity())
    assert resolution.outcome == ResolutionOutcome.FOUND
    assert resolution.effective_role == Role.ADMIN
    assert directory.inserts == []


async def test_missing_record_is_provisioned_as_user():
    directory = FakeDirectory()
    resolution = await RoleResolver(directory).resolve(_identity(name="Sam"))
    assert resolution.outcome == ResolutionOutcome.CREATED
    assert resolution.effective_role == Role.USER
    assert directory.inserts == [{
        "id": "subj-1", "email": "subj1@campus.edu", "name": "Sam", "role": "USER",
    }]


async def test_lost_insert_race_reports_winner_role():
    resolution = await RoleResolver(RacingDirectory("MODERATOR")).resolve(_identity())
    assert resolution.outcome == ResolutionOutcome.FOUND
    assert resolution.effective_role == Role.MODERATOR


async def test_store_failure_is_denied_not_raised():
    resolution = await RoleResolver(FakeDirectory(fail=True)).resolve(_identity())
    assert resolution.outcome == ResolutionOutcome.DENIED
    assert not resolution.is_admin


async def test_identity_without_email_is_not_provisioned():
    store = FakeDirectory()
    resolution = await RoleResolver(store).resolve(_identity(email=""))
    assert resolution.outcome == ResolutionOutcome.DENIED
    assert store.inserts == []


async def test_existing_record_without_token_email_is_found():
    store = FakeDirectory({"subj-1": "MODERATOR"})
    resolution = await RoleResolver(store).resolve(_identity(email=""))
    assert resolution.outcome == ResolutionOutcome.FOUND
    assert resolution.effective_role == Role.MODERATOR


async def test_unknown_stored_role_is_denied():
    resolution = await RoleResolver(FakeDirectory({"subj-1": "OVERLORD"})).resolve(_identity())
    assert resolution.outcome == ResolutionOutcome.DENIED
    assert resolution.effective_role == Role.USER


async def test_sql_resolution_is_idempotent(test_db):
    resolver = RoleResolver(SqlDirectoryStore(test_db))

    first = await resolver.resolve(_identity())
    second = await resolver.resolve(_identity())

    assert first.outcome == ResolutionOutcome.CREATED
    assert second.outcome == ResolutionOutcome.FOUND
    assert second.effective_role == Role.USER
    count = await test_db.execute(
        select(func.count()).select_from(User).where(User.id == "subj-1"),
    )
    assert count.scalar_one() == 1


async def test_sql_provisioning_uses_email_local_part(test_db):
    store = SqlDirectoryStore(test_db)
    await RoleResolver(store).resolve(_identity(email="jordan@campus.edu"))
    user = await store.get(SubjectId("subj-1"))
    assert user.name == "jordan"
    assert user.role == "USER"


async def test_sql_email_collision_is_denied(test_db, seed_user):
    await seed_user("someone-else", "taken@campus.edu")

    resolution = await RoleResolver(SqlDirectoryStore(test_db)).resolve(
        _identity(sub="newcomer", email="taken@campus.edu"),
    )

    assert resolution.outcome == ResolutionOutcome.DENIED
    assert await SqlDirectoryStore(test_db).get(SubjectId("newcomer")) is None


async def test_sql_stored_admin_is_found(test_db, seed_user):
    await seed_user("boss", "boss@campus.edu", Role.ADMIN)
    resolution = await RoleResolver(SqlDirectoryStore(test_db)).resolve(
        _identity(sub="boss", email="boss@campus.edu"),
    )
    assert resolution.outcome == ResolutionOutcome.FOUND
    assert resolution.is_admin
