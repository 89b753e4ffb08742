"""Auth Routes — verifies sign-up provisioning, sign-in, sign-out and session bootstrap.

Invariants:
    - Sign-up refuses an email already in the directory (409)
    - Sign-up provisions a USER directory record keyed by the provider's user id
    - /session reports role from the directory, never from token claims
"""

from sqlalchemy import select

from campus_portal.core.domain_types import Role
from campus_portal.models.user import User


async def test_sign_up_provisions_directory_record(client, identity_client, test_session_factory):
    res = await client.post(
        "/api/auth/signup",
        json={"email": "new@campus.edu", "password": "secret123", "name": "Nova"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["emailConfirmationRequired"] is True
    assert body["session"] is None
    assert body["user"]["id"] == "idp-new@campus.edu"
    assert identity_client.calls[0] == (
        "sign_up", {"email": "new@campus.edu", "metadata": {"name": "Nova"}},
    )

    async with test_session_factory() as session:
        user = (await session.execute(
            select(User).where(User.id == "idp-new@campus.edu"),
        )).scalar_one()
    assert user.name == "Nova"
    assert user.role == "USER"


async def test_sign_up_with_auto_confirm_returns_session(client, identity_client):
    identity_client.sign_up_session = True
    res = await client.post(
        "/api/auth/signup",
        json={"email": "fast@campus.edu", "password": "secret123", "name": "Fay"},
    )
    assert res.status_code == 201
    assert res.json()["session"]["accessToken"] == "issued-token"
    assert res.json()["emailConfirmationRequired"] is False


async def test_sign_up_with_taken_email_is_conflict(client, seed_user, identity_client):
    await seed_user("existing", "taken@campus.edu")
    res = await client.post(
        "/api/auth/signup",
        json={"email": "taken@campus.edu", "password": "secret123", "name": "Dup"},
    )
    assert res.status_code == 409
    assert res.json()["code"] == "EMAIL_TAKEN"
    assert identity_client.calls == []


async def test_sign_up_validates_payload(client):
    res = await client.post(
        "/api/auth/signup",
        json={"email": "not-an-email", "password": "123", "name": "X"},
    )
    assert res.status_code == 400
    fields = {d["field"] for d in res.json()["details"]}
    assert "body.email" in fields
    assert "body.password" in fields


async def test_sign_in_returns_provider_session(client):
    res = await client.post(
        "/api/auth/signin",
        json={"email": "a@campus.edu", "password": "correct-password"},
    )
    assert res.status_code == 200
    assert res.json()["accessToken"] == "issued-token"
    assert res.json()["tokenType"] == "bearer"


async def test_sign_in_with_bad_password_is_401(client):
    res = await client.post(
        "/api/auth/signin", json={"email": "a@campus.edu", "password": "wrong"},
    )
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid login credentials"


async def test_sign_out_revokes_with_bearer_token(client, identity_client, user_headers):
    res = await client.post("/api/auth/signout", headers=user_headers)
    assert res.status_code == 204
    token = user_headers["Authorization"].removeprefix("Bearer ")
    assert identity_client.calls == [("sign_out", {"token": token})]


async def test_sign_out_requires_token(client):
    res = await client.post("/api/auth/signout")
    assert res.status_code == 401


async def test_session_bootstrap_for_new_user(client, user_headers):
    res = await client.get("/api/auth/session", headers=user_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["resolution"] == "created"
    assert body["role"] == "USER"
    assert body["isAdmin"] is False
    assert body["identity"]["email"] == "user1@campus.edu"
    assert body["profile"]["name"] == "Ursula"


async def test_session_bootstrap_for_admin(client, admin_headers):
    body = (await client.get("/api/auth/session", headers=admin_headers)).json()
    assert body["resolution"] == "found"
    assert body["role"] == Role.ADMIN.value
    assert body["isAdmin"] is True


async def test_token_role_claims_are_ignored(client, headers_for):
    headers = headers_for(
        "sneaky", "sneaky@campus.edu",
        app_metadata={"role": "ADMIN"}, role="ADMIN",
    )
    body = (await client.get("/api/auth/session", headers=headers)).json()
    assert body["role"] == "USER"
    assert body["isAdmin"] is False


async def test_session_reports_email_verification(client, headers_for):
    headers = headers_for(
        "verified", "verified@campus.edu", email_confirmed_at="2026-10-01T00:00:00Z",
    )
    body = (await client.get("/api/auth/session", headers=headers)).json()
    assert body["isEmailVerified"] is True


async def test_expired_token_is_401(client, headers_for):
    res = await client.get(
        "/api/auth/session",
        headers=headers_for("late", "late@campus.edu", expires_in=-60),
    )
    assert res.status_code == 401
    assert res.json()["error"] == "Token expired"


async def test_token_signed_with_other_secret_is_401(client, headers_for):
    res = await client.get(
        "/api/auth/session",
        headers=headers_for("forger", "forger@campus.edu", secret="not-the-secret"),
    )
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid token"


async def test_update_profile_syncs_directory(client, identity_client, user_headers):
    await client.get("/api/auth/session", headers=user_headers)

    res = await client.put(
        "/api/auth/me", json={"avatar": "https://cdn.test/u1.png"}, headers=user_headers,
    )

    assert res.status_code == 200
    assert identity_client.calls[-1] == (
        "update_user_metadata", {"data": {"avatar": "https://cdn.test/u1.png"}},
    )
    profile = (await client.get("/api/users/user-1", headers=user_headers)).json()
    assert profile["avatar"] == "https://cdn.test/u1.png"
