import os

os.environ.setdefault("BOOKSHOP_JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("BOOKSHOP_PASSWORD_HASH_ROUNDS", "4")

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from main import app
from app.models.cart import Cart
from app.models.user import User
from app.models.voucher import Voucher


USER_PAYLOAD = {
    "firstName": "Test",
    "lastName": "User",
    "email": "test@example.com",
    "password": "password123",
    "contactNumber": "1234567890",
    "address": "123 Test St",
}


@pytest.fixture(scope="session", autouse=True)
def mongo_connection():
    connect(
        "bookshop_test",
        alias="default",
        host="mongodb://localhost",
        mongo_client_class=mongomock.MongoClient,
        tz_aware=True,
    )
    yield
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def clean_collections():
    yield
    for model in (User, Cart, Voucher):
        model.drop_collection()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def lenient_client() -> TestClient:
    """Client that returns 500 responses instead of re-raising server errors."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def register(client):
    """Register a user and return the response `data` (profile + token)."""

    def _register(**overrides) -> dict:
        response = client.post("/api/users/register", json={**USER_PAYLOAD, **overrides})
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(register) -> dict:
    token = register()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(auth_headers) -> User:
    return User.objects(email=USER_PAYLOAD["email"]).first()
