"""Read-only access to the CRM's properties, leads and users."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Literal

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from crm_dashboard.core.errors import DataAccessFailure
from crm_dashboard.models import Lead, Property, User
from crm_dashboard.schemas import (
    LeadRecord,
    NamedRef,
    PropertyRecord,
    PropertyTypeRef,
    UserRecord,
)

logger = structlog.get_logger()

TimeRange = tuple[datetime, datetime]
PropertySort = Literal["created_at", "price", "views"]

_PROPERTY_SORT_COLUMNS = {
    "created_at": Property.created_at,
    "price": Property.price,
    "views": Property.views,
}


def _property_record(row: Property, populate_type: bool) -> PropertyRecord:
    property_type = None
    if populate_type and row.property_type is not None:
        property_type = PropertyTypeRef(
            id=str(row.property_type.id),
            type_name=row.property_type.type_name,
        )

    return PropertyRecord(
        id=str(row.id),
        name=row.name,
        price=row.price,
        property_status=row.property_status,
        property_type_id=str(row.property_type_id) if row.property_type_id else None,
        property_type=property_type,
        created_by_user_id=row.created_by_user_id,
        views=row.views,
        published=row.published,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _lead_record(row: Lead) -> LeadRecord:
    return LeadRecord(
        id=str(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        full_name=row.full_name,
        email=row.email,
        phone=row.phone,
        lead_status=row.lead_status,
        lead_designation=row.lead_designation,
        follow_up_status=row.follow_up_status,
        assigned_to=row.assigned_to,
        published=row.published,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _user_record(row: User, populate_role: bool) -> UserRecord:
    role = None
    if populate_role and row.role is not None:
        role = NamedRef(id=str(row.role.id), name=row.role.name)

    return UserRecord(
        id=str(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        role=role,
        published=row.published,
    )


class CRMStore:
    """Query helper bound to one session.

    Every query is restricted to published records. Any SQLAlchemy error is
    re-raised as :class:`DataAccessFailure`.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _scalars(self, query: Select[Any]) -> Sequence[Any]:
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            logger.warning("CRM store query failed", error=str(e))
            raise DataAccessFailure(str(e)) from e
        return result.scalars().all()

    async def _count(self, query: Select[Any]) -> int:
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            logger.warning("CRM store count failed", error=str(e))
            raise DataAccessFailure(str(e)) from e
        return result.scalar() or 0

    # Properties

    async def find_properties(
        self,
        *,
        status: str | None = None,
        updated_between: TimeRange | None = None,
        order_by: PropertySort | None = None,
        limit: int | None = None,
        populate_type: bool = False,
    ) -> list[PropertyRecord]:
        """Find published properties.

        Args:
            status: Exact ``property_status`` to match.
            updated_between: Half-open ``[start, end)`` range on ``updated_at``.
            order_by: Column to sort by, highest/newest first.
            limit: Maximum number of records.
            populate_type: Resolve the property type reference.
        """
        query = select(Property).where(Property.published.is_(True))

        if status is not None:
            query = query.where(Property.property_status == status)
        if updated_between is not None:
            start, end = updated_between
            query = query.where(Property.updated_at >= start, Property.updated_at < end)
        if order_by is not None:
            query = query.order_by(_PROPERTY_SORT_COLUMNS[order_by].desc().nulls_last())
        if limit is not None:
            query = query.limit(limit)
        if populate_type:
            query = query.options(selectinload(Property.property_type))

        rows = await self._scalars(query)
        return [_property_record(row, populate_type) for row in rows]

    async def count_properties(self, *, created_between: TimeRange | None = None) -> int:
        query = (
            select(func.count())
            .select_from(Property)
            .where(Property.published.is_(True))
        )
        if created_between is not None:
            start, end = created_between
            query = query.where(Property.created_at >= start, Property.created_at < end)
        return await self._count(query)

    # Leads

    async def find_leads(
        self,
        *,
        order_by: Literal["created_at"] | None = None,
        limit: int | None = None,
    ) -> list[LeadRecord]:
        """Find published leads, optionally newest first and limited."""
        query = select(Lead).where(Lead.published.is_(True))

        if order_by == "created_at":
            query = query.order_by(Lead.created_at.desc().nulls_last())
        if limit is not None:
            query = query.limit(limit)

        rows = await self._scalars(query)
        return [_lead_record(row) for row in rows]

    async def count_leads(self, *, created_between: TimeRange | None = None) -> int:
        query = (
            select(func.count())
            .select_from(Lead)
            .where(Lead.published.is_(True))
        )
        if created_between is not None:
            start, end = created_between
            query = query.where(Lead.created_at >= start, Lead.created_at < end)
        return await self._count(query)

    # Users

    async def find_users(self, *, populate_role: bool = False) -> list[UserRecord]:
        query = (
            select(User)
            .where(User.published.is_(True))
            .order_by(User.created_at)
        )
        if populate_role:
            query = query.options(selectinload(User.role))

        rows = await self._scalars(query)
        return [_user_record(row, populate_role) for row in rows]

    async def count_users(self) -> int:
        query = (
            select(func.count())
            .select_from(User)
            .where(User.published.is_(True))
        )
        return await self._count(query)
