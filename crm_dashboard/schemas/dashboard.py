"""Pydantic schemas for dashboard report payloads and response envelopes."""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import Field

from crm_dashboard.schemas.records import CamelModel, PropertyRecord

DataT = TypeVar("DataT")


class ApiResponse(CamelModel, Generic[DataT]):
    """Successful report envelope."""

    status_code: int = 200
    message: str
    data: DataT


class ErrorResponse(CamelModel):
    """Failed report envelope."""

    status_code: int = 500
    message: str
    error: str


class OverviewReport(CamelModel):
    """Headline counts for the dashboard landing page."""

    total_properties: int
    sold_properties: int
    unsold_properties: int
    total_sales: float = Field(description="Sum of prices of sold properties")
    total_leads: int
    total_users: int
    active_leads: int
    pending_followups: int
    average_rating: float


class TypeSales(CamelModel):
    """Sales rollup for one property type."""

    total_sales: float = 0
    count: int = 0
    average_price: float = 0


class PropertyAnalytics(CamelModel):
    """Distributions over published properties."""

    total_properties: int
    sold_properties: int
    active_properties: int
    total_value: float
    recent_properties: int = Field(description="Properties created within the recent window")
    status_distribution: dict[str, int]
    type_distribution: dict[str, int]
    price_ranges: dict[str, int]
    property_type_sales: dict[str, TypeSales] = Field(
        description="Per-type rollups ordered by total sales, highest first",
    )
    average_price: float


class RecentLead(CamelModel):
    """Flattened lead for the recent leads list."""

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    status: str
    designation: str
    created_at: datetime | None = None


class LeadAnalytics(CamelModel):
    """Distributions and conversion over published leads."""

    total_leads: int
    status_distribution: dict[str, int]
    designation_distribution: dict[str, int]
    follow_up_distribution: dict[str, int]
    recent_leads: int = Field(description="Leads created within the recent window")
    recent_leads_list: list[RecentLead]
    converted_leads: int
    conversion_rate: float = Field(description="Percentage of converted leads")


class MonthlySales(CamelModel):
    """Sold count and revenue for one month."""

    count: int = 0
    revenue: float = 0


class SalesAnalytics(CamelModel):
    """Sales over the trailing months."""

    total_sales: int
    total_revenue: float
    average_sale_price: float
    monthly_sales: dict[str, MonthlySales] = Field(description="Keyed by YYYY-MM")


class UserPerformance(CamelModel):
    """Lead and listing counts for one user."""

    user_id: str
    user_name: str
    total_leads: int
    active_leads: int
    total_properties: int
    sold_properties: int


class UserAnalytics(CamelModel):
    """Role distribution and per-user performance."""

    total_users: int
    role_distribution: dict[str, int]
    user_performance: list[UserPerformance]


class Activity(CamelModel):
    """One entry of the recent activity feed."""

    type: Literal["property", "lead"]
    title: str
    subtitle: str
    description: str
    time: datetime | None = None
    data: dict[str, Any] = Field(description="The record the activity was built from")


class DayPerformance(CamelModel):
    """Properties and leads created on one day."""

    day: str = Field(description="YYYY-MM-DD")
    day_name: str
    properties: int
    leads: int
    total: int


class MonthTrend(CamelModel):
    """Activity and revenue for one month."""

    month: str = Field(description="YYYY-MM")
    month_name: str
    properties: int
    leads: int
    sold_properties: int
    revenue: float


class TopProperties(CamelModel):
    """Highest priced and most viewed listings."""

    top_by_price: list[PropertyRecord]
    top_by_views: list[PropertyRecord]


class DesignationConversion(CamelModel):
    """Conversion for one lead designation."""

    total: int
    converted: int
    rate: float


class LeadConversion(CamelModel):
    """Global and per-designation lead conversion."""

    total_leads: int
    converted_leads: int
    conversion_rate: float
    designation_conversion: dict[str, DesignationConversion]


class FinancialSummary(CamelModel):
    """Revenue from sold properties, with a monthly breakdown for this year."""

    total_revenue: float
    average_sale_price: float
    total_sales: int
    monthly_revenue: dict[int, float] = Field(description="Keyed by month number 1-12")
