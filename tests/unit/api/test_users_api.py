"""End-to-end tests for the /api/v1/users endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.db.session import get_db
from app.main import app
from app.models.token import SCOPE_ACTIVATION

USERS = "/api/v1/users"


@pytest.fixture
def client(engine):
    def _get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def alice(make_user):
    return make_user()


@pytest.fixture
def auth(alice, make_token):
    return {"Authorization": f"Bearer {make_token(alice.id)}"}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestRegister:
    def test_created(self, client):
        response = client.post(USERS, json={"name": "Bob", "email": "bob@example.com",
                                            "password": "pa55word-for-tests"})
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "bob@example.com"
        assert body["activated"] is False
        assert "password" not in body
        assert "password_hash" not in body
        assert "version" not in body

    def test_duplicate_email_conflict(self, client, alice):
        response = client.post(USERS, json={"name": "Alice", "email": "alice@example.com",
                                            "password": "pa55word-for-tests"})
        assert response.status_code == 409
        assert "email" in response.json()["error"]

    def test_validation_errors(self, client):
        response = client.post(USERS, json={"name": "", "email": "bob@example.com", "password": "password123"})
        assert response.status_code == 422
        assert response.json()["error"] == {"name": "must be provided", "password": "is too common"}

    def test_malformed_email_uses_error_body(self, client):
        response = client.post(USERS, json={"name": "Bob", "email": "not-an-email", "password": "pa55word-for-tests"})
        assert response.status_code == 422
        body = response.json()
        assert "detail" not in body
        assert list(body["error"]) == ["email"]

    def test_missing_field_uses_error_body(self, client):
        response = client.post(USERS, json={"name": "Bob", "email": "bob@example.com"})
        assert response.status_code == 422
        assert list(response.json()["error"]) == ["password"]


class TestAuthentication:
    def test_me(self, client, auth):
        response = client.get(f"{USERS}/me", headers=auth)
        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"

    def test_anonymous_rejected(self, client):
        assert client.get(f"{USERS}/me").status_code == 401

    def test_bad_token_rejected(self, client, alice):
        response = client.get(f"{USERS}/me", headers={"Authorization": "Bearer not-a-real-token"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_activation_token_cannot_authenticate(self, client, alice, make_token):
        token = make_token(alice.id, scope=SCOPE_ACTIVATION)
        response = client.get(f"{USERS}/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestList:
    def test_paginated(self, client, auth, make_user):
        make_user(name="Bob", email="bob@example.com")
        response = client.get(USERS, params={"sort": "-name", "page_size": 1}, headers=auth)
        assert response.status_code == 200
        body = response.json()
        assert [u["name"] for u in body["users"]] == ["Bob"]
        assert body["metadata"] == {"current_page": 1, "page_size": 1, "first_page": 1, "last_page": 2,
                                    "total_records": 2}

    def test_empty_page_metadata(self, client, auth):
        response = client.get(USERS, params={"name": "nobody"}, headers=auth)
        assert response.json() == {"users": [], "metadata": {}}

    def test_invalid_sort(self, client, auth):
        response = client.get(USERS, params={"sort": "password_hash"}, headers=auth)
        assert response.status_code == 422
        assert response.json()["error"] == {"sort": "invalid sort value"}

    def test_requires_auth(self, client):
        assert client.get(USERS).status_code == 401


class TestUpdateMe:
    def test_update_name(self, client, auth):
        response = client.patch(f"{USERS}/me", json={"name": "Alice B"}, headers=auth)
        assert response.status_code == 200
        assert response.json()["name"] == "Alice B"

    def test_stale_version_conflict(self, client, auth):
        response = client.patch(f"{USERS}/me", json={"name": "Alice B"},
                                headers={**auth, "X-Expected-Version": "7"})
        assert response.status_code == 409

    def test_wrong_current_password(self, client, auth):
        response = client.patch(f"{USERS}/me", json={"password": "new-pa55word", "current_password": "nope-nope"},
                                headers=auth)
        assert response.status_code == 401
        assert response.json()["detail"] == "invalid authentication credentials"

    def test_overlong_current_password_rejected(self, client, auth):
        response = client.patch(f"{USERS}/me", json={"password": "new-pa55word", "current_password": "x" * 73},
                                headers=auth)
        assert response.status_code == 401
        assert response.json()["detail"] == "invalid authentication credentials"

    def test_malformed_email_uses_error_body(self, client, auth):
        response = client.patch(f"{USERS}/me", json={"email": "nope"}, headers=auth)
        assert response.status_code == 422
        assert list(response.json()["error"]) == ["email"]

    def test_email_taken(self, client, auth, make_user):
        make_user(name="Bob", email="bob@example.com")
        response = client.patch(f"{USERS}/me", json={"email": "bob@example.com"}, headers=auth)
        assert response.status_code == 409


class TestActivate:
    def test_activate(self, client, alice, make_token):
        token = make_token(alice.id, scope=SCOPE_ACTIVATION)
        response = client.put(f"{USERS}/activated", json={"token": token})
        assert response.status_code == 200
        assert response.json()["activated"] is True

    def test_unknown_token(self, client):
        response = client.put(f"{USERS}/activated", json={"token": "unknown"})
        assert response.status_code == 422
