"""
Identity tests: registration, login, credential verification, profile.

Scenarios:
- register issues a credential that verifies back to the same identity
- duplicate username/email -> 409; missing fields -> 400
- login by username or email; unknown user and wrong password look the same
- missing credential -> 401, bad or expired credential -> 403
"""

from datetime import timedelta

import pytest

from gymtracker.core.clock import utc_today
from gymtracker.core.errors import Unauthorized
from gymtracker.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from gymtracker.schemas.user import CurrentUser
from tests.conftest import USER_PASSWORD, make_auth_headers

pytestmark = pytest.mark.integration

NEW_USER = {
    "username": "newbie",
    "email": "newbie@example.com",
    "password": "hunter22",
    "name": "New Bie",
    "height": 180,
    "weight": 82.5,
}


# ---------------------------------------------------------------------------
# Unit: hashing and credentials
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_password_hash_round_trip():
    hashed = hash_password("pa55word")

    assert hashed != "pa55word"
    assert verify_password("pa55word", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("pa55word", None)
    assert not verify_password("pa55word", "not-a-hash")


@pytest.mark.unit
def test_credential_round_trip():
    identity = CurrentUser(id=7, username="ann", email="ann@example.com")

    assert decode_access_token(create_access_token(identity)) == identity


@pytest.mark.unit
def test_expired_credential_is_rejected():
    identity = CurrentUser(id=7, username="ann", email="ann@example.com")
    token = create_access_token(identity, expires_delta=timedelta(days=-1))

    with pytest.raises(Unauthorized):
        decode_access_token(token)


@pytest.mark.unit
def test_tampered_credential_is_rejected():
    identity = CurrentUser(id=7, username="ann", email="ann@example.com")
    token = create_access_token(identity)

    with pytest.raises(Unauthorized):
        decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))


# ---------------------------------------------------------------------------
# Register / login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_returns_verifiable_credential(client):
    response = await client.post("/api/register", json=NEW_USER)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "newbie"
    assert body["user"]["email"] == "newbie@example.com"
    assert body["user"]["join_date"] == utc_today().isoformat()
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]

    identity = decode_access_token(body["token"])
    assert identity.id == body["user"]["id"]
    assert identity.username == "newbie"
    assert identity.email == "newbie@example.com"


@pytest.mark.asyncio
async def test_register_duplicate_returns_409(client, user):
    same_username = await client.post(
        "/api/register", json={**NEW_USER, "username": user.username}
    )
    same_email = await client.post("/api/register", json={**NEW_USER, "email": user.email})

    assert same_username.status_code == 409
    assert same_email.status_code == 409
    assert "error" in same_username.json()


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["username", "email", "password"])
async def test_register_requires_fields(client, missing):
    payload = {k: v for k, v in NEW_USER.items() if k != missing}

    response = await client.post("/api/register", json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("login", ["lifter", "lifter@example.com"])
async def test_login_by_username_or_email(client, user, login):
    response = await client.post("/api/login", json={"username": login, "password": USER_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user.id
    assert decode_access_token(body["token"]) == user


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, user):
    wrong_password = await client.post("/api/login", json={"username": "lifter", "password": "nope"})
    unknown_user = await client.post("/api/login", json={"username": "ghost", "password": "nope"})

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_profile(client, user):
    response = await client.get("/api/profile", headers=make_auth_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user.id
    assert body["username"] == "lifter"
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_profile_without_credential_returns_401(client):
    response = await client.get("/api/profile")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_profile_with_bad_credential_returns_403(client, user):
    expired = create_access_token(user, expires_delta=timedelta(seconds=-10))

    garbage = await client.get("/api/profile", headers={"Authorization": "Bearer not-a-token"})
    stale = await client.get("/api/profile", headers={"Authorization": f"Bearer {expired}"})

    assert garbage.status_code == 403
    assert stale.status_code == 403


@pytest.mark.asyncio
async def test_profile_of_deleted_account_returns_404(client):
    ghost = CurrentUser(id=4242, username="ghost", email="ghost@example.com")

    response = await client.get("/api/profile", headers=make_auth_headers(ghost))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_profile(client, user):
    headers = make_auth_headers(user)

    response = await client.put("/api/profile", json={"height": 175.5, "weight": 78}, headers=headers)

    assert response.status_code == 200
    assert response.json()["height"] == 175.5
    assert response.json()["weight"] == 78
    assert response.json()["name"] == "Lifter"
