"""API routes for the dashboard service."""

from crm_dashboard.api.dashboard import router as dashboard_router

__all__ = ["dashboard_router"]
