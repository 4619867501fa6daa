"""Pydantic schemas for records and dashboard reports."""

from crm_dashboard.schemas.dashboard import (
    Activity,
    ApiResponse,
    DayPerformance,
    DesignationConversion,
    ErrorResponse,
    FinancialSummary,
    LeadAnalytics,
    LeadConversion,
    MonthlySales,
    MonthTrend,
    OverviewReport,
    PropertyAnalytics,
    RecentLead,
    SalesAnalytics,
    TopProperties,
    TypeSales,
    UserAnalytics,
    UserPerformance,
)
from crm_dashboard.schemas.records import (
    LeadRecord,
    NamedRef,
    PropertyRecord,
    PropertyTypeRef,
    UserRecord,
)

__all__ = [
    # Envelopes
    "ApiResponse",
    "ErrorResponse",
    # Records
    "LeadRecord",
    "NamedRef",
    "PropertyRecord",
    "PropertyTypeRef",
    "UserRecord",
    # Reports
    "Activity",
    "DayPerformance",
    "DesignationConversion",
    "FinancialSummary",
    "LeadAnalytics",
    "LeadConversion",
    "MonthTrend",
    "MonthlySales",
    "OverviewReport",
    "PropertyAnalytics",
    "RecentLead",
    "SalesAnalytics",
    "TopProperties",
    "TypeSales",
    "UserAnalytics",
    "UserPerformance",
]
