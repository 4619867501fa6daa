"""Pydantic records for the CRM entities read by the reports.

Records mirror what the CRM stores: loosely typed, with polymorphic status
fields and nullable numbers. Normalization happens in the reducers, not here.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NamedRef(CamelModel):
    """Reference to another entity carrying a display name."""

    id: str | None = None
    name: str | None = None


class PropertyTypeRef(CamelModel):
    """Resolved property type."""

    id: str | None = None
    type_name: str | None = None


class _TimestampedRecord(CamelModel):
    @field_validator("created_at", "updated_at", check_fields=False)
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        # Timestamps without a zone are stored in UTC
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PropertyRecord(_TimestampedRecord):
    """A published property listing."""

    id: str
    name: str | None = None
    price: float | int | str | None = None
    property_status: str | None = None
    property_type_id: str | None = None
    property_type: PropertyTypeRef | None = None
    created_by_user_id: str | None = None
    views: float | int | None = None
    published: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LeadRecord(_TimestampedRecord):
    """A published lead."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    lead_status: str | NamedRef | None = None
    lead_designation: str | None = None
    follow_up_status: str | NamedRef | None = None
    assigned_to: str | None = None
    published: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserRecord(CamelModel):
    """A published CRM user."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: NamedRef | None = None
    published: bool = True
