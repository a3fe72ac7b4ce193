"""Shared fixtures: an in-memory database and a TestClient per test."""
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from src.config import Settings
from src.db.core import Database
from src.main import create_app

PASSWORD = "secret123"

_emails = count(1)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite://",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        rate_limit_enabled=False,
    )


@pytest.fixture
def database():
    # One shared connection so every session sees the same in-memory database
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(client):
    """Register a user and return {"user", "token", "headers", "email"}"""
    def _make_user(email=None, password=PASSWORD, full_name="Test User"):
        email = email or f"user{next(_emails)}@example.com"
        response = client.post(
            "/auth/register",
            json={"email": email, "password": password, "full_name": full_name},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return {
            "user": data["user"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
            "email": email,
        }
    return _make_user


@pytest.fixture
def make_account(client):
    def _make_account(owner, **fields):
        body = {"name": "Wallet", "type": "personal", **fields}
        response = client.post("/api/accounts", json=body, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()["account"]
    return _make_account


@pytest.fixture
def add_member(client):
    """Invite a user to an account with a role and accept on their behalf"""
    def _add_member(owner, account, member, role):
        response = client.post(
            f"/api/accounts/{account['id']}/members",
            json={"email": member["email"], "role": role},
            headers=owner["headers"],
        )
        assert response.status_code == 201, response.text
        response = client.post(f"/api/accounts/{account['id']}/members/accept", headers=member["headers"])
        assert response.status_code == 200, response.text
        return response.json()["member"]
    return _add_member


@pytest.fixture
def owner(make_user):
    return make_user(full_name="Owner")


@pytest.fixture
def account(make_account, owner):
    return make_account(owner, initial_balance="1000.00")
