from __future__ import annotations

import pytest
from jose import jwt

from expense_client.api.errors import ApiError
from expense_client.services.auth_service import (
    AuthError,
    AuthService,
    google_credentials_from_id_token,
)


def _google_token(**claims) -> str:
    return jwt.encode(claims, "not-verified", algorithm="HS256")


async def test_signup_then_login_persists_token(client, session, backend):
    auth = AuthService(client)
    user = await auth.signup("new@test.com", "secret", "New User")

    assert user.email == "new@test.com"
    assert auth.is_authenticated
    assert session.get() in backend.tokens


async def test_signup_duplicate(client, backend, auth_token):
    with pytest.raises(ApiError) as info:
        await AuthService(client).signup("test@test.com", "other", "Someone")
    assert info.value.status_code == 409
    assert str(info.value) == "User already exists"


async def test_login_rejects_bad_password(client, session, backend):
    backend.create_user("test@test.com", "testpass", "Test User")
    auth = AuthService(client)
    with pytest.raises(ApiError, match="Invalid email or password"):
        await auth.login("test@test.com", "wrong")
    assert session.get() is None
    assert not auth.is_authenticated


async def test_restore_loads_profile(client, auth_token):
    auth = AuthService(client)
    user = await auth.restore()
    assert user.name == "Test User"
    assert auth.is_loading is False


async def test_restore_without_token(client, backend):
    auth = AuthService(client)
    assert await auth.restore() is None
    assert backend.requests == []


async def test_restore_discards_rejected_token(client, session):
    session.set("stale")
    auth = AuthService(client)
    assert await auth.restore() is None
    assert session.get() is None


async def test_unauthorized_response_signs_out(client, session, backend, auth_token):
    auth = AuthService(client)
    await auth.restore()
    backend.tokens.clear()

    with pytest.raises(ApiError):
        await client.get("/api/categories")
    assert auth.user is None


async def test_logout(client, session, auth_token):
    auth = AuthService(client)
    await auth.restore()
    auth.logout()
    assert session.get() is None
    assert not auth.is_authenticated


async def test_google_login_creates_account(client, session, backend):
    token = _google_token(email="g@test.com", sub="10987", name="Gee", picture="https://img/x.png")
    user = await AuthService(client).google_login(token)

    assert user.email == "g@test.com"
    assert backend.tokens[session.get()] == user.id


def test_google_claims_are_mapped():
    credentials = google_credentials_from_id_token(_google_token(email="g@test.com", sub=42))
    assert credentials.to_payload() == {
        "email": "g@test.com",
        "provider": "google",
        "providerAccountId": "42",
    }


@pytest.mark.parametrize(
    "token, message",
    [
        (_google_token(email="g@test.com"), "Missing email or subject"),
        (_google_token(sub="1"), "Missing email or subject"),
        ("not-a-jwt", "Invalid Google credential"),
    ],
)
def test_bad_google_tokens(token, message):
    with pytest.raises(AuthError, match=message):
        google_credentials_from_id_token(token)


async def test_closed_service_stops_following_session(client, session, auth_token):
    closed = AuthService(client)
    active = AuthService(client)
    await closed.restore()
    await active.restore()

    closed.close()
    session.clear(reason="unauthorized")

    assert closed.user is not None
    assert active.user is None
