import re
from datetime import timedelta

import pytest
from mongoengine import NotUniqueError

from app.models.user import User
from app.services import auth as auth_service
from app.services import cart as cart_service
from app.services.auth import create_token, verify_password
from app.utils.config import settings
from tests.conftest import USER_PAYLOAD


def test_register_returns_profile_and_token(client):
    response = client.post("/api/users/register", json=USER_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert re.fullmatch(r"\d{8}", data["userId"])
    assert data["email"] == USER_PAYLOAD["email"]
    assert data["firstName"] == "Test"
    assert data["token"]
    assert "password" not in data


def test_password_is_hashed_at_rest(register):
    register()

    stored = User.objects(email=USER_PAYLOAD["email"]).first()
    assert stored.password != USER_PAYLOAD["password"]
    assert verify_password(USER_PAYLOAD["password"], stored.password)


@pytest.mark.parametrize("field", sorted(USER_PAYLOAD))
def test_register_requires_every_field(client, field):
    payload = {k: v for k, v in USER_PAYLOAD.items() if k != field}

    response = client.post("/api/users/register", json=payload)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert User.objects.count() == 0


def test_register_rejects_blank_field(client):
    response = client.post("/api/users/register", json={**USER_PAYLOAD, "address": ""})

    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required"
    assert User.objects.count() == 0


def test_register_rejects_invalid_email(client):
    response = client.post("/api/users/register", json={**USER_PAYLOAD, "email": "not-an-email"})

    assert response.status_code == 400
    assert User.objects.count() == 0


def test_register_rejects_short_password(client):
    response = client.post("/api/users/register", json={**USER_PAYLOAD, "password": "abc"})

    assert response.status_code == 400
    assert User.objects.count() == 0


def test_duplicate_email_conflicts(client, register):
    register()

    response = client.post("/api/users/register", json={**USER_PAYLOAD, "firstName": "Other"})

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"
    assert User.objects.count() == 1


def test_user_ids_are_unique_eight_digit_numbers(register):
    ids = {register(email=f"user{i}@example.com")["userId"] for i in range(5)}

    assert len(ids) == 5
    assert all(re.fullmatch(r"\d{8}", user_id) for user_id in ids)


def test_user_id_generation_gives_up_after_bounded_attempts(client, register, monkeypatch):
    existing = register()["userId"]
    calls = []

    def _same_id():
        calls.append(1)
        return existing

    monkeypatch.setattr(auth_service, "generate_user_id", _same_id)
    response = client.post("/api/users/register", json={**USER_PAYLOAD, "email": "second@example.com"})

    assert response.status_code == 500
    assert response.json()["message"] == "Could not generate a unique user ID"
    assert len(calls) == 10
    assert User.objects.count() == 1


def test_login_with_valid_credentials(client, register):
    user_id = register()["userId"]

    response = client.post("/api/users/login", json={"email": USER_PAYLOAD["email"], "password": USER_PAYLOAD["password"]})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] == user_id
    assert data["token"]


@pytest.mark.parametrize("email,password", [
    ("test@example.com", "wrong-password"),
    ("nobody@example.com", "password123"),
])
def test_login_rejects_bad_credentials(client, register, email, password):
    register()

    response = client.post("/api/users/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials", "error": None}


def test_profile_requires_token(client):
    response = client.get("/api/users/profile")

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.parametrize("header", ["Bearer not-a-jwt", "Token abc", "Bearer"])
def test_profile_rejects_malformed_or_invalid_header(client, register, header):
    register()

    response = client.get("/api/users/profile", headers={"Authorization": header})

    assert response.status_code == 401


def test_profile_rejects_expired_token(client, register):
    user_id = register()["userId"]
    token = create_token(user_id, timedelta(seconds=-10), "access")

    response = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_profile_rejects_token_of_deleted_user(client, auth_headers):
    User.objects.delete()

    response = client.get("/api/users/profile", headers=auth_headers)

    assert response.status_code == 401


def test_get_profile(client, auth_headers):
    response = client.get("/api/users/profile", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == USER_PAYLOAD["email"]
    assert "password" not in data
    assert "token" not in data


def test_update_profile_applies_given_fields(client, auth_headers):
    response = client.put("/api/users/profile", headers=auth_headers, json={"address": "9 New Road"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address"] == "9 New Road"
    assert data["firstName"] == USER_PAYLOAD["firstName"]
    assert data["token"]


def test_update_profile_rehashes_password(client, auth_headers):
    client.put("/api/users/profile", headers=auth_headers, json={"password": "brand-new-secret"})

    old = client.post("/api/users/login", json={"email": USER_PAYLOAD["email"], "password": USER_PAYLOAD["password"]})
    new = client.post("/api/users/login", json={"email": USER_PAYLOAD["email"], "password": "brand-new-secret"})

    assert old.status_code == 401
    assert new.status_code == 200


def test_update_profile_rejects_taken_email(client, register, auth_headers):
    register(email="taken@example.com")

    response = client.put("/api/users/profile", headers=auth_headers, json={"email": "taken@example.com"})

    assert response.status_code == 400
    assert User.objects(email=USER_PAYLOAD["email"]).count() == 1


@pytest.mark.parametrize("payload", [
    {"password": "abc"},
    {"email": "not-an-email"},
])
def test_update_profile_applies_register_rules(client, auth_headers, payload):
    response = client.put("/api/users/profile", headers=auth_headers, json=payload)

    assert response.status_code == 400
    assert response.json()["success"] is False
    login = client.post("/api/users/login", json={"email": USER_PAYLOAD["email"], "password": USER_PAYLOAD["password"]})
    assert login.status_code == 200


def test_duplicate_user_id_on_save_is_internal_error(client, monkeypatch):
    def duplicate_save(self, *args, **kwargs):
        raise NotUniqueError("E11000 duplicate key error index: user_id_1 dup key")

    monkeypatch.setattr(User, "save", duplicate_save)

    response = client.post("/api/users/register", json=USER_PAYLOAD)

    assert response.status_code == 500
    assert response.json()["message"] == "Could not generate a unique user ID"


def test_duplicate_email_on_save_is_conflict(client, monkeypatch):
    def duplicate_save(self, *args, **kwargs):
        raise NotUniqueError("E11000 duplicate key error index: email_1 dup key")

    monkeypatch.setattr(User, "save", duplicate_save)

    response = client.post("/api/users/register", json=USER_PAYLOAD)

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"


def _failing_get_cart(user):
    raise RuntimeError("db down")


def test_unexpected_error_uses_envelope(lenient_client, auth_headers, monkeypatch):
    monkeypatch.setattr(cart_service, "get_cart", _failing_get_cart)

    response = lenient_client.get("/api/cart", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server Error", "error": "db down"}


def test_unexpected_error_hides_detail_in_production(lenient_client, auth_headers, monkeypatch):
    monkeypatch.setattr(cart_service, "get_cart", _failing_get_cart)
    monkeypatch.setattr(settings, "environment", "production")

    response = lenient_client.get("/api/cart", headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Server Error"
    assert body.get("error") is None


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False
