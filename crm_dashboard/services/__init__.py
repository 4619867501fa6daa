"""Data-access services."""

from crm_dashboard.services.crm_store import CRMStore

__all__ = ["CRMStore"]
