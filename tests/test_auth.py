from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import auth_headers


def test_register_returns_token_and_profile(client, register_user):
    token, user = register_user()

    assert token
    assert user["username"] == "alice"
    assert user["phone"] == "9876543210"
    assert user["wwid"] is None
    assert user["balance"] == 0.0
    assert user["hasSpin"] is False
    assert user["apiEnabled"] is False


def test_register_duplicate_username_or_phone(client, register_user):
    register_user()

    res = client.post("/api/auth/register", json={"username": "alice", "phone": "1111111", "password": "secret123"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "USER_EXISTS"

    res = client.post("/api/auth/register", json={"username": "bob", "phone": "9876543210", "password": "secret123"})
    assert res.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "al", "phone": "9876543210", "password": "secret123"},
        {"username": "alice", "phone": "12ab", "password": "secret123"},
        {"username": "alice", "phone": "9876543210", "password": "123"},
    ],
)
def test_register_validation(client, payload):
    res = client.post("/api/auth/register", json=payload)
    assert res.status_code == 422


def test_login_with_username_or_phone(client, register_user):
    register_user()

    for ident in ("alice", "9876543210"):
        res = client.post("/api/auth/login", json={"usernameOrPhone": ident, "password": "secret123"})
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["username"] == "alice"
        assert body["hasSpin"] is False


def test_login_bad_credentials(client, register_user):
    register_user()

    res = client.post("/api/auth/login", json={"usernameOrPhone": "alice", "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"

    res = client.post("/api/auth/login", json={"usernameOrPhone": "nobody", "password": "secret123"})
    assert res.status_code == 401


def test_me_requires_valid_token(client, register_user):
    token, _ = register_user()

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=auth_headers("garbage")).status_code == 401

    res = client.get("/api/auth/me", headers=auth_headers(token))
    assert res.status_code == 200
    assert res.json()["username"] == "alice"


def test_expired_token_rejected(client, register_user):
    _, user = register_user()
    expired = jwt.encode(
        {"id": user["id"], "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "test-secret",
        algorithm="HS256",
    )

    res = client.get("/api/auth/me", headers=auth_headers(expired))
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Token expired"


@pytest.mark.parametrize("wwid", ["abc", "alice2024", "a" * 20])
def test_set_wwid_accepts_valid(client, register_user, wwid):
    token, _ = register_user()

    res = client.post("/api/auth/wwid", json={"wwid": wwid}, headers=auth_headers(token))
    assert res.status_code == 200
    assert res.json()["wwid"] == wwid


@pytest.mark.parametrize("wwid", ["ab", "a" * 21, "Alice", "alice_1", "alice@ww", ""])
def test_set_wwid_rejects_invalid(client, register_user, wwid):
    token, _ = register_user()

    res = client.post("/api/auth/wwid", json={"wwid": wwid}, headers=auth_headers(token))
    assert res.status_code == 422


def test_wwid_taken_by_someone_else(client, register_user):
    alice, _ = register_user()
    bob, _ = register_user(username="bob", phone="1234567")

    assert client.post("/api/auth/wwid", json={"wwid": "shared"}, headers=auth_headers(alice)).status_code == 200

    res = client.post("/api/auth/wwid", json={"wwid": "shared"}, headers=auth_headers(bob))
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "WWID_TAKEN"

    # setting your own wwid again is fine
    assert client.post("/api/auth/wwid", json={"wwid": "shared"}, headers=auth_headers(alice)).status_code == 200


def test_wwid_availability(client, register_user):
    alice, _ = register_user()
    bob, _ = register_user(username="bob", phone="1234567")
    client.post("/api/auth/wwid", json={"wwid": "alice1"}, headers=auth_headers(alice))

    res = client.get("/api/auth/wwid/available", params={"wwid": "alice1"}, headers=auth_headers(bob))
    assert res.json() == {"wwid": "alice1", "valid": True, "available": False}

    res = client.get("/api/auth/wwid/available", params={"wwid": "alice1"}, headers=auth_headers(alice))
    assert res.json()["available"] is True

    res = client.get("/api/auth/wwid/available", params={"wwid": "BAD!"}, headers=auth_headers(bob))
    assert res.json() == {"wwid": "BAD!", "valid": False, "available": False}


def test_spin_setup_and_verify(client, register_user):
    token, _ = register_user()
    headers = auth_headers(token)

    res = client.post("/api/auth/verify-pin", json={"spin": "1234"}, headers=headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SPIN_NOT_SET"

    res = client.post("/api/auth/spin", json={"spin": "1234", "confirmSpin": "1234"}, headers=headers)
    assert res.status_code == 200
    assert client.get("/api/auth/me", headers=headers).json()["hasSpin"] is True

    res = client.post("/api/auth/verify-pin", json={"spin": "1234"}, headers=headers)
    assert res.json() == {"verified": True}

    res = client.post("/api/auth/verify-pin", json={"spin": "9999"}, headers=headers)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "INVALID_SPIN"


@pytest.mark.parametrize(
    "payload",
    [
        {"spin": "123", "confirmSpin": "123"},
        {"spin": "12a4", "confirmSpin": "12a4"},
        {"spin": "1234", "confirmSpin": "4321"},
    ],
)
def test_spin_setup_validation(client, register_user, payload):
    token, _ = register_user()

    res = client.post("/api/auth/spin", json=payload, headers=auth_headers(token))
    assert res.status_code == 422


def test_spin_is_stored_hashed(client, register_user, db_session):
    from core.storage import UserStorage

    token, user = register_user()
    client.post("/api/auth/spin", json={"spin": "1234", "confirmSpin": "1234"}, headers=auth_headers(token))

    stored = UserStorage(db_session).get_user(user["id"])
    assert stored.spin != "1234"
    assert stored.password != "secret123"


def test_username_cannot_shadow_another_users_phone(client, register_user):
    register_user(username="bob", phone="1234567")

    res = client.post("/api/auth/register", json={"username": "1234567", "phone": "5555555", "password": "secret123"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "USER_EXISTS"

    res = client.post("/api/auth/login", json={"usernameOrPhone": "1234567", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "bob"


def test_phone_cannot_shadow_another_users_username(client, register_user):
    register_user(username="5555555", phone="9876543210")

    res = client.post("/api/auth/register", json={"username": "carol", "phone": "5555555", "password": "secret123"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "USER_EXISTS"


def test_changing_spin_requires_current_spin(client, register_user):
    token, _ = register_user()
    headers = auth_headers(token)
    client.post("/api/auth/spin", json={"spin": "1234", "confirmSpin": "1234"}, headers=headers)

    res = client.post("/api/auth/spin", json={"spin": "5678", "confirmSpin": "5678"}, headers=headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "CURRENT_SPIN_REQUIRED"

    res = client.post(
        "/api/auth/spin",
        json={"spin": "5678", "confirmSpin": "5678", "currentSpin": "0000"},
        headers=headers,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "INVALID_SPIN"

    res = client.post(
        "/api/auth/spin",
        json={"spin": "5678", "confirmSpin": "5678", "currentSpin": "1234"},
        headers=headers,
    )
    assert res.status_code == 200
    assert client.post("/api/auth/verify-pin", json={"spin": "5678"}, headers=headers).status_code == 200
    assert client.post("/api/auth/verify-pin", json={"spin": "1234"}, headers=headers).status_code == 403
