"""Notification Routes — verifies recipients see and manage only their own."""

from uuid import uuid4

from campus_portal.models.notification import Notification


async def _seed_notification(factory, user_id, message="Hello"):
    async with factory() as session:
        note = Notification(user_id=user_id, message=message, type="info")
        session.add(note)
        await session.commit()
        return note


async def test_list_returns_only_own_newest_first(
    client, approved_event, user_headers, test_session_factory, seed_user,
):
    await approved_event(title="Robotics Demo")
    await seed_user("user-9", "nine@campus.edu")
    await _seed_notification(test_session_factory, "user-9", "Not yours")
    await _seed_notification(test_session_factory, "user-1", "Newest")

    res = await client.get("/api/notifications", headers=user_headers)

    assert res.status_code == 200
    messages = [n["message"] for n in res.json()]
    assert messages == ["Newest", 'Your event "Robotics Demo" has been approved.']


async def test_list_requires_authentication(client):
    res = await client.get("/api/notifications")
    assert res.status_code == 401


async def test_mark_read(client, user_headers, test_session_factory, seed_user):
    await seed_user("user-1", "user1@campus.edu")
    note = await _seed_notification(test_session_factory, "user-1")

    res = await client.put(f"/api/notifications/{note.id}/read", headers=user_headers)

    assert res.status_code == 200
    assert res.json()["read"] is True


async def test_cannot_mark_someone_elses_notification(
    client, other_headers, test_session_factory, seed_user,
):
    await seed_user("user-1", "user1@campus.edu")
    note = await _seed_notification(test_session_factory, "user-1")

    res = await client.put(f"/api/notifications/{note.id}/read", headers=other_headers)
    assert res.status_code == 403


async def test_mark_missing_notification_is_404(client, user_headers):
    res = await client.put(f"/api/notifications/{uuid4()}/read", headers=user_headers)
    assert res.status_code == 404


async def test_delete_own_notification(client, user_headers, test_session_factory, seed_user):
    await seed_user("user-1", "user1@campus.edu")
    note = await _seed_notification(test_session_factory, "user-1")

    res = await client.delete(f"/api/notifications/{note.id}", headers=user_headers)
    assert res.status_code == 204

    listing = await client.get("/api/notifications", headers=user_headers)
    assert listing.json() == []


async def test_cannot_delete_someone_elses_notification(
    client, other_headers, test_session_factory, seed_user,
):
    await seed_user("user-1", "user1@campus.edu")
    note = await _seed_notification(test_session_factory, "user-1")

    res = await client.delete(f"/api/notifications/{note.id}", headers=other_headers)
    assert res.status_code == 403
