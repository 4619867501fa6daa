"""Lead SQLAlchemy model."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, String, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from crm_dashboard.core.database import Base

# Status fields hold either a plain string or a {"name": ...} reference
StatusJSON = JSON().with_variant(JSONB(), "postgresql")


class Lead(Base):
    """A sales lead captured by the CRM."""

    __tablename__ = "leads"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    lead_status: Mapped[Any] = mapped_column(
        StatusJSON,
        nullable=True,
        comment="Status as a plain string or a {name} reference",
    )
    lead_designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    follow_up_status: Mapped[Any] = mapped_column(
        StatusJSON,
        nullable=True,
        comment="Follow-up status as a plain string or a {name} reference",
    )
    assigned_to: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Identifier of the user the lead is assigned to",
    )
    published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Lead {self.full_name or self.email} status={self.lead_status}>"
