import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from shopflow.core.auth import get_current_user  # noqa: E402
from shopflow.database import get_session  # noqa: E402
from shopflow.main import app  # noqa: E402
from shopflow.models.user import ROLE_ADMIN, ROLE_USER, ROLE_VENDOR, User  # noqa: E402


def product_payload(**overrides):
    """A valid create payload; keyword overrides replace top-level keys."""
    payload = {
        "name": "Wireless Bluetooth Headphones",
        "description": "Premium quality wireless headphones with noise cancellation.",
        "price": 99.99,
        "category": "electronics",
        "images": ["https://cdn.shopflow.test/img/headphones.jpg"],
        "inventory": 5,
        "tags": ["audio", "wireless"],
        "shipping": {
            "weight": 0.8,
            "dimensions": {"length": 20, "width": 18, "height": 9},
            "freeShipping": True,
        },
    }
    payload.update(overrides)
    return payload


class Actor:
    """Mutable holder for the user the API should see as authenticated."""

    def __init__(self):
        self.user: User | None = None

    def __call__(self) -> User | None:
        return self.user


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def make_user(engine):
    def _make(role: str, email: str | None = None) -> User:
        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            email=email or f"{role}-{user_id.hex[:8]}@shopflow.test",
            name=role,
            role=role,
        )
        with Session(engine) as s:
            s.add(user)
            s.commit()
            s.refresh(user)
            s.expunge(user)
        return user

    return _make


@pytest.fixture()
def vendor(make_user):
    return make_user(ROLE_VENDOR)


@pytest.fixture()
def other_vendor(make_user):
    return make_user(ROLE_VENDOR)


@pytest.fixture()
def admin(make_user):
    return make_user(ROLE_ADMIN)


@pytest.fixture()
def customer(make_user):
    return make_user(ROLE_USER)


@pytest.fixture()
def actor():
    return Actor()


@pytest.fixture()
def client(engine, actor):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_current_user] = actor
    yield TestClient(app)
    app.dependency_overrides.pop(get_session, None)
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def create_product(client, actor, vendor):
    """POST a product as `as_user` (default: vendor) and return the JSON body."""

    def _create(as_user: User | None = None, **overrides):
        previous = actor.user
        actor.user = as_user or vendor
        try:
            response = client.post("/api/products", json=product_payload(**overrides))
        finally:
            actor.user = previous
        assert response.status_code == 201, response.text
        return response.json()

    return _create
