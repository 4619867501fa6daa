"""Tests for the CRM store against an in-memory SQLite database."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from crm_dashboard.core.errors import DataAccessFailure
from crm_dashboard.models import PropertyType, Role
from crm_dashboard.schemas import NamedRef
from crm_dashboard.services import CRMStore
from tests.conftest import NOW, at, make_lead, make_property, make_user


class TestProperties:
    async def test_only_published_records_are_returned(self, session: AsyncSession):
        session.add_all([
            make_property(name="Visible"),
            make_property(name="Draft", published=False),
        ])
        await session.commit()

        store = CRMStore(session)
        properties = await store.find_properties()

        assert [prop.name for prop in properties] == ["Visible"]
        assert await store.count_properties() == 1

    async def test_status_filter_is_exact(self, session: AsyncSession):
        session.add_all([
            make_property(name="A", property_status="SOLD"),
            make_property(name="B", property_status="Sold"),
            make_property(name="C", property_status="sold "),
        ])
        await session.commit()

        sold = await CRMStore(session).find_properties(status="SOLD")

        assert [prop.name for prop in sold] == ["A"]

    async def test_sort_and_limit_put_missing_values_last(self, session: AsyncSession):
        session.add_all([
            make_property(name="No price", price=None),
            make_property(name="Cheap", price=1_000_000),
            make_property(name="Premium", price=90_000_000),
            make_property(name="Mid", price=12_000_000),
        ])
        await session.commit()

        top = await CRMStore(session).find_properties(order_by="price", limit=3)

        assert [prop.name for prop in top] == ["Premium", "Mid", "Cheap"]

    async def test_populate_resolves_property_type(self, session: AsyncSession):
        villa = PropertyType(id=uuid4(), type_name="Villa")
        session.add(villa)
        session.add_all([
            make_property(name="Typed", property_type_id=villa.id),
            make_property(name="Untyped"),
        ])
        await session.commit()
        session.expunge_all()

        store = CRMStore(session)
        populated = {p.name: p for p in await store.find_properties(populate_type=True)}
        plain = {p.name: p for p in await store.find_properties()}

        assert populated["Typed"].property_type.type_name == "Villa"
        assert populated["Typed"].property_type_id == str(villa.id)
        assert populated["Untyped"].property_type is None
        assert plain["Typed"].property_type is None

    async def test_ranges_are_half_open(self, session: AsyncSession):
        session.add_all([
            make_property(name="Start", created_at=at(2026, 10, 12, hour=0)),
            make_property(name="Inside", created_at=at(2026, 10, 12, hour=23)),
            make_property(name="End", created_at=at(2026, 10, 13, hour=0)),
            make_property(
                name="Updated",
                property_status="SOLD",
                updated_at=at(2026, 10, 12, hour=8),
            ),
        ])
        await session.commit()

        store = CRMStore(session)
        day = (at(2026, 10, 12, hour=0), at(2026, 10, 13, hour=0))

        assert await store.count_properties(created_between=day) == 2
        updated = await store.find_properties(status="SOLD", updated_between=day)
        assert [prop.name for prop in updated] == ["Updated"]

    async def test_timestamps_come_back_as_utc(self, session: AsyncSession):
        session.add(make_property(created_at=NOW))
        await session.commit()
        session.expunge_all()

        (prop,) = await CRMStore(session).find_properties()

        assert prop.created_at == NOW
        assert prop.created_at.tzinfo is not None


class TestLeads:
    async def test_polymorphic_status_round_trips(self, session: AsyncSession):
        session.add_all([
            make_lead(full_name="Plain", lead_status="converted"),
            make_lead(full_name="Reference", lead_status={"name": "closed", "id": "s-1"}),
            make_lead(full_name="Missing", lead_status=None),
        ])
        await session.commit()
        session.expunge_all()

        leads = {lead.full_name: lead for lead in await CRMStore(session).find_leads()}

        assert leads["Plain"].lead_status == "converted"
        assert leads["Reference"].lead_status == NamedRef(id="s-1", name="closed")
        assert leads["Missing"].lead_status is None

    async def test_newest_first_with_limit(self, session: AsyncSession):
        session.add_all([
            make_lead(full_name=f"Lead {day}", created_at=at(2026, 10, day))
            for day in range(1, 6)
        ])
        session.add(make_lead(full_name="Hidden", created_at=at(2026, 10, 9), published=False))
        await session.commit()

        store = CRMStore(session)
        leads = await store.find_leads(order_by="created_at", limit=3)

        assert [lead.full_name for lead in leads] == ["Lead 5", "Lead 4", "Lead 3"]
        assert await store.count_leads() == 5
        assert await store.count_leads(
            created_between=(at(2026, 10, 2, hour=0), at(2026, 10, 4, hour=0)),
        ) == 2


class TestUsers:
    async def test_users_with_roles(self, session: AsyncSession):
        agent = Role(id=uuid4(), name="Agent")
        session.add(agent)
        session.add_all([
            make_user(first_name="Ravi", role_id=agent.id, created_at=at(2026, 1, 1)),
            make_user(first_name="Neha", created_at=at(2026, 2, 1)),
            make_user(first_name="Gone", published=False),
        ])
        await session.commit()

        store = CRMStore(session)
        users = await store.find_users(populate_role=True)

        assert [user.first_name for user in users] == ["Ravi", "Neha"]
        assert users[0].role == NamedRef(id=str(agent.id), name="Agent")
        assert users[1].role is None
        assert await store.count_users() == 2


async def test_query_errors_become_data_access_failures():
    # No tables created
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    try:
        async with AsyncSession(engine) as session:
            store = CRMStore(session)
            with pytest.raises(DataAccessFailure, match="no such table"):
                await store.find_properties()
            await session.rollback()
            with pytest.raises(DataAccessFailure):
                await store.count_leads()
    finally:
        await engine.dispose()
