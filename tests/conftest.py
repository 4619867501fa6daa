"""Shared pytest fixtures for the dashboard tests."""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crm_dashboard.api.dashboard import get_clock
from crm_dashboard.core.database import get_async_session, init_db
from crm_dashboard.core.security import create_access_token
from crm_dashboard.main import app
from crm_dashboard.models import Lead, Property, User
from crm_dashboard.schemas import LeadRecord, PropertyRecord

# Wednesday; the current week starts on Monday 2026-10-12
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


def at(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def make_property(**overrides: Any) -> Property:
    fields: dict[str, Any] = {
        "id": uuid4(),
        "name": "Lake View Residency",
        "price": 4_000_000,
        "property_status": "Active",
        "views": 0,
        "published": True,
        "created_at": NOW,
    }
    fields.update(overrides)
    return Property(**fields)


def make_lead(**overrides: Any) -> Lead:
    fields: dict[str, Any] = {
        "id": uuid4(),
        "first_name": "Asha",
        "last_name": "Rao",
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "+91 98450 00000",
        "lead_status": "new",
        "lead_designation": "Buyer",
        "follow_up_status": "pending",
        "published": True,
        "created_at": NOW,
    }
    fields.update(overrides)
    return Lead(**fields)


def make_user(**overrides: Any) -> User:
    fields: dict[str, Any] = {
        "id": uuid4(),
        "first_name": "Ravi",
        "last_name": "Kumar",
        "email": "ravi@example.com",
        "published": True,
        "created_at": NOW,
    }
    fields.update(overrides)
    return User(**fields)


def property_record(**overrides: Any) -> PropertyRecord:
    fields: dict[str, Any] = {"id": str(uuid4()), "created_at": NOW}
    fields.update(overrides)
    return PropertyRecord(**fields)


def lead_record(**overrides: Any) -> LeadRecord:
    fields: dict[str, Any] = {"id": str(uuid4()), "created_at": NOW}
    fields.update(overrides)
    return LeadRecord(**fields)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite database with all CRM tables created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database and a frozen clock."""

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = create_access_token("3f1c9a52-0000-4000-8000-000000000001", role="admin")
    return {"Authorization": f"Bearer {token}"}
