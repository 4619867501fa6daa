"""CRM SQLAlchemy models."""

from crm_dashboard.core.database import Base
from crm_dashboard.models.lead import Lead
from crm_dashboard.models.property import Property, PropertyType
from crm_dashboard.models.user import Role, User

__all__ = ["Base", "Lead", "Property", "PropertyType", "Role", "User"]
