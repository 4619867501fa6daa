"""Property SQLAlchemy models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_dashboard.core.database import Base


class PropertyType(Base):
    """Lookup table of property types (apartment, villa, plot, ...)."""

    __tablename__ = "property_types"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    type_name: Mapped[str] = mapped_column(String(100), nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<PropertyType {self.type_name}>"


class Property(Base):
    """A property listing managed in the CRM."""

    __tablename__ = "properties"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
        comment="Listing price in major currency units (rupees)",
    )
    property_status: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        index=True,
        comment="Free-text status, e.g. 'SOLD', 'Active'; casing is not enforced",
    )
    property_type_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("property_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by_user_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Identifier of the user who listed the property",
    )
    views: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
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

    # Relationships
    property_type: Mapped[PropertyType | None] = relationship(lazy="raise")

    def __repr__(self) -> str:
        return f"<Property {self.name} status={self.property_status} price={self.price}>"
