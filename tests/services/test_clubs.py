"""Club Routes — verifies creation with founding member, membership and deletion.

Invariants:
    - Creator becomes a club ADMIN member
    - Club detail lists only APPROVED events
    - Deleting a club detaches its events and posts instead of deleting them
"""

from uuid import uuid4


async def _create_club(client, headers, **overrides):
    payload = {"name": "Chess Club", "description": "Weekly games", "category": "games"}
    res = await client.post("/api/clubs", json={**payload, **overrides}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


async def test_creator_becomes_club_admin(client, user_headers):
    club = await _create_club(client, user_headers)
    assert club["status"] == "ACTIVE"
    assert club["memberCount"] == 1

    detail = (await client.get(f"/api/clubs/{club['id']}")).json()
    assert detail["members"] == [
        {
            "userId": "user-1",
            "role": "ADMIN",
            "createdAt": detail["members"][0]["createdAt"],
            "user": {"id": "user-1", "name": "Ursula"},
        },
    ]


async def test_list_clubs_filters_by_status(client, user_headers):
    active = await _create_club(client, user_headers, name="Active Club")
    dormant = await _create_club(client, user_headers, name="Dormant Club")
    await client.put(
        f"/api/clubs/{dormant['id']}", json={"status": "INACTIVE"}, headers=user_headers,
    )

    res = await client.get("/api/clubs", params={"status": "ACTIVE"})
    assert [c["id"] for c in res.json()] == [active["id"]]


async def test_club_detail_shows_only_approved_events(
    client, user_headers, create_event, approved_event,
):
    club = await _create_club(client, user_headers)
    await create_event(user_headers, title="Pending meetup", clubId=club["id"])
    await approved_event(title="Approved tournament", clubId=club["id"])

    detail = (await client.get(f"/api/clubs/{club['id']}")).json()
    assert [e["title"] for e in detail["events"]] == ["Approved tournament"]


async def test_get_missing_club_is_404(client):
    res = await client.get(f"/api/clubs/{uuid4()}")
    assert res.status_code == 404


async def test_join_and_duplicate_join(client, user_headers, other_headers):
    club = await _create_club(client, user_headers)

    res = await client.post(f"/api/clubs/{club['id']}/join", headers=other_headers)
    assert res.status_code == 201

    again = await client.post(f"/api/clubs/{club['id']}/join", headers=other_headers)
    assert again.status_code == 409
    assert again.json()["code"] == "ALREADY_MEMBER"

    detail = (await client.get(f"/api/clubs/{club['id']}")).json()
    assert detail["memberCount"] == 2


async def test_leave_club(client, user_headers, other_headers):
    club = await _create_club(client, user_headers)
    await client.post(f"/api/clubs/{club['id']}/join", headers=other_headers)

    res = await client.delete(f"/api/clubs/{club['id']}/join", headers=other_headers)
    assert res.status_code == 204

    missing = await client.delete(f"/api/clubs/{club['id']}/join", headers=other_headers)
    assert missing.status_code == 404


async def test_stranger_cannot_update_club(client, user_headers, other_headers):
    club = await _create_club(client, user_headers)
    res = await client.put(
        f"/api/clubs/{club['id']}", json={"name": "Taken over"}, headers=other_headers,
    )
    assert res.status_code == 403


async def test_admin_updates_foreign_club(client, user_headers, admin_headers):
    club = await _create_club(client, user_headers)
    res = await client.put(
        f"/api/clubs/{club['id']}", json={"name": "Renamed"}, headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Renamed"


async def test_delete_club_detaches_events_and_posts(
    client, user_headers, create_event,
):
    club = await _create_club(client, user_headers)
    event = await create_event(user_headers, clubId=club["id"])
    post = await client.post(
        "/api/posts",
        json={"title": "Welcome", "content": "First meeting", "clubId": club["id"]},
        headers=user_headers,
    )

    res = await client.delete(f"/api/clubs/{club['id']}", headers=user_headers)
    assert res.status_code == 204

    assert (await client.get(f"/api/clubs/{club['id']}")).status_code == 404
    kept_event = (await client.get(f"/api/events/{event['id']}")).json()
    assert kept_event["clubId"] is None
    kept_post = (await client.get(f"/api/posts/{post.json()['id']}")).json()
    assert kept_post["clubId"] is None


async def test_stranger_cannot_delete_club(client, user_headers, other_headers):
    club = await _create_club(client, user_headers)
    res = await client.delete(f"/api/clubs/{club['id']}", headers=other_headers)
    assert res.status_code == 403
