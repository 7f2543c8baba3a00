import os

# must be set before any application module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEPOSITS_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient

from core.database import Base, SessionLocal, engine
from main import app


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client):
    """Register a user and return ``(token, profile)``."""

    def _register(username="alice", phone="9876543210", password="secret123"):
        res = client.post(
            "/api/auth/register",
            json={"username": username, "phone": phone, "password": password},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def funded_user(client, register_user):
    """Register a user with an S-PIN of 1234 and a balance of 500."""

    def _funded(username="alice", phone="9876543210", balance="500.00"):
        token, user = register_user(username=username, phone=phone)
        headers = auth_headers(token)
        res = client.post("/api/auth/spin", json={"spin": "1234", "confirmSpin": "1234"}, headers=headers)
        assert res.status_code == 200, res.text
        res = client.post(
            "/api/transactions/deposit",
            json={"amount": balance, "reference": f"seed-{username}"},
            headers=headers,
        )
        assert res.status_code == 201, res.text
        return token, user

    return _funded
