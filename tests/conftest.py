"""Shared pytest fixtures for storefront tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import init_db, make_engine, make_session_factory
from storefront.domain.schemas import InsertProduct, InsertUser
from storefront.main import create_app
from storefront.repos.database import DatabaseStorage
from storefront.repos.memory import MemStorage
from storefront.repos.sessions import MemorySessionStore
from storefront.services.credentials import hash_password


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, start=datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store(clock):
    return MemorySessionStore(check_period=3600, ttl=600, clock=clock)


@pytest.fixture
def mem_storage(clock, session_store):
    return MemStorage(session_store=session_store, clock=clock)


@pytest.fixture
def db_storage(clock, session_store):
    engine = make_engine("sqlite://")
    init_db(engine)
    yield DatabaseStorage(make_session_factory(engine), session_store=session_store, clock=clock)
    engine.dispose()


@pytest.fixture(params=["mem_storage", "db_storage"])
def storage(request):
    """Runs a test against both repository implementations."""
    return request.getfixturevalue(request.param)


@pytest.fixture
def make_product():
    def _make(**overrides):
        data = dict(
            name="Widget",
            description="A useful widget",
            price=Decimal("9.99"),
            image_url="https://example.com/widget.png",
            category="Tools",
            inventory=5,
            sku="WG-001",
            featured=False,
        )
        data.update(overrides)
        return InsertProduct(**data)

    return _make


@pytest.fixture
def make_user():
    def _make(username="alice", password="s3cret", is_admin=False, **overrides):
        data = dict(
            username=username,
            email=f"{username}@example.com",
            password=hash_password(password),
            full_name=username.title(),
            is_admin=is_admin,
        )
        data.update(overrides)
        return InsertUser(**data)

    return _make


@pytest.fixture
def app(mem_storage):
    return create_app(storage=mem_storage, seed_data=False)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(app, mem_storage, make_user):
    mem_storage.create_user(make_user("root", password="rootpass", is_admin=True))
    with TestClient(app) as c:
        resp = c.post("/api/login", json={"username": "root", "password": "rootpass"})
        assert resp.status_code == 200
        yield c
