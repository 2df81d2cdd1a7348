from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

from expense_client.api.client import ApiClient
from expense_client.database import create_storage_engine
from expense_client.services.notifications import Notifier
from expense_client.services.session_service import SessionManager
from expense_client.services.storage_service import LocalStorage
from tests.fake_backend import FakeBackend


@pytest.fixture()
def storage(tmp_path) -> LocalStorage:
    engine = create_storage_engine(f"sqlite:///{tmp_path / 'storage.db'}")
    yield LocalStorage(sessionmaker(engine, expire_on_commit=False))
    engine.dispose()


@pytest.fixture()
def session(storage: LocalStorage) -> SessionManager:
    return SessionManager(storage)


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def client(backend: FakeBackend, session: SessionManager) -> AsyncGenerator[ApiClient]:
    async with ApiClient(
        session,
        base_url="http://test",
        transport=httpx.ASGITransport(app=backend.app),
    ) as c:
        yield c


@pytest.fixture()
def auth_token(backend: FakeBackend, session: SessionManager) -> str:
    token = backend.create_user("test@test.com", "testpass", "Test User")
    session.set(token)
    return token


@pytest.fixture()
def user_id(backend: FakeBackend, auth_token: str) -> int:
    return backend.tokens[auth_token]


@pytest.fixture()
def seeded(backend: FakeBackend, user_id: int) -> dict:
    """Two categories, USD/EUR/JPY and a handful of expenses for the test user."""
    food = backend.add_category(user_id, "Food", "#22C55E")
    travel = backend.add_category(user_id, "Travel", "#3B82F6")
    usd = backend.add_currency(user_id, "USD", "1")
    eur = backend.add_currency(user_id, "EUR", "1.08")
    jpy = backend.add_currency(user_id, "JPY", "150")
    backend.add_expense(user_id, "60", food["id"], usd["id"], date="2025-03-01T12:00:00+00:00")
    backend.add_expense(user_id, "40", food["id"], usd["id"], date="2025-03-02T12:00:00+00:00")
    backend.add_expense(user_id, "50", travel["id"], eur["id"], date="2025-03-03T12:00:00+00:00")
    backend.add_expense(user_id, "15000", travel["id"], jpy["id"], date="2025-03-04T12:00:00+00:00")
    return {"food": food, "travel": travel, "usd": usd, "eur": eur, "jpy": jpy}
