"""Bearer token resolution against the real get_current_user dependency."""

import time
import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session

from shopflow.core.auth import get_current_user
from shopflow.core.config import get_settings
from shopflow.database import get_session
from shopflow.main import app
from shopflow.models.user import ROLE_VENDOR, User

from conftest import product_payload


def _token(sub: str, email: str, expires_in: int = 3600, secret: str | None = None) -> str:
    settings = get_settings()
    claims = {"sub": sub, "email": email, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALG)


@pytest.fixture()
def auth_client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides.pop(get_current_user, None)
    yield TestClient(app)
    app.dependency_overrides.pop(get_session, None)


def test_guest_can_browse(auth_client):
    response = auth_client.get("/api/products")
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_new_user_is_provisioned_as_customer(auth_client, engine):
    sub = str(uuid.uuid4())
    headers = {"Authorization": f"Bearer {_token(sub, 'new.shopper@shopflow.test')}"}

    response = auth_client.post("/api/products", json=product_payload(), headers=headers)
    assert response.status_code == 403

    with Session(engine) as session:
        user = session.get(User, uuid.UUID(sub))
        assert user is not None
        assert user.role == "user"
        assert user.name == "new.shopper"


def test_vendor_token_can_create(auth_client, make_user):
    vendor = make_user(ROLE_VENDOR)
    headers = {"Authorization": f"Bearer {_token(str(vendor.id), vendor.email)}"}

    response = auth_client.post("/api/products", json=product_payload(), headers=headers)
    assert response.status_code == 201
    assert response.json()["vendor"] == str(vendor.id)


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        _token(str(uuid.uuid4()), "a@shopflow.test", expires_in=-60),
        _token(str(uuid.uuid4()), "a@shopflow.test", secret="wrong-secret"),
        _token("not-a-uuid", "a@shopflow.test"),
    ],
)
def test_bad_tokens_are_unauthenticated(auth_client, token):
    response = auth_client.get("/api/products", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
