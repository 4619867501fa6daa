"""Dashboard report endpoints."""

import time
from collections.abc import Awaitable
from typing import Annotated, Any, TypeVar

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crm_dashboard.aggregators import Clock, ReportAggregator
from crm_dashboard.aggregators.reducers import utc_now
from crm_dashboard.core.config import get_settings
from crm_dashboard.core.database import AsyncSessionDep
from crm_dashboard.core.deps import CurrentPrincipal
from crm_dashboard.core.observability import record_report, record_report_failure
from crm_dashboard.schemas import (
    Activity,
    ApiResponse,
    DayPerformance,
    ErrorResponse,
    FinancialSummary,
    LeadAnalytics,
    LeadConversion,
    MonthTrend,
    OverviewReport,
    PropertyAnalytics,
    SalesAnalytics,
    TopProperties,
    UserAnalytics,
)
from crm_dashboard.services import CRMStore

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])

T = TypeVar("T")

FAILURE_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_clock() -> Clock:
    """Wall clock used for time buckets (overridden in tests)."""
    return utc_now


def get_report_aggregator(
    session: AsyncSessionDep,
    clock: Annotated[Clock, Depends(get_clock)],
) -> ReportAggregator:
    return ReportAggregator(CRMStore(session), settings=get_settings(), clock=clock)


Aggregator = Annotated[ReportAggregator, Depends(get_report_aggregator)]


async def run_report(
    report: str,
    build: Awaitable[T],
    success_message: str,
    failure_message: str,
) -> JSONResponse:
    """Await a report and wrap it in the response envelope.

    Successful reports are encoded with camelCase keys and returned as-is;
    the route's response_model documents their shape.

    Any exception aborts the report: it is logged and turned into the 500
    envelope carrying the underlying message.
    """
    start_time = time.perf_counter()
    try:
        data = await build
    except Exception as e:
        record_report_failure(report)
        logger.exception("Report failed", report=report, error=str(e))
        body = ErrorResponse(message=failure_message, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(by_alias=True),
        )

    duration = time.perf_counter() - start_time
    record_report(report, duration)
    logger.debug("Report built", report=report, duration_ms=round(duration * 1000, 2))

    body = ApiResponse(message=success_message, data=data)
    return JSONResponse(status_code=status.HTTP_200_OK, content=jsonable_encoder(body))


@router.get(
    "/overview",
    response_model=ApiResponse[OverviewReport],
    responses=FAILURE_RESPONSES,
)
async def get_dashboard_overview(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get overall dashboard statistics.

    Sold/unsold counts compare statuses case-insensitively.
    """
    return await run_report(
        "overview",
        aggregator.overview(principal),
        "Dashboard overview retrieved successfully",
        "Error retrieving dashboard overview",
    )


@router.get(
    "/properties",
    response_model=ApiResponse[PropertyAnalytics],
    responses=FAILURE_RESPONSES,
)
async def get_property_analytics(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get status, type and price distributions of published properties."""
    return await run_report(
        "property_analytics",
        aggregator.property_analytics(),
        "Property analytics retrieved successfully",
        "Error retrieving property analytics",
    )


@router.get(
    "/leads",
    response_model=ApiResponse[LeadAnalytics],
    responses=FAILURE_RESPONSES,
)
async def get_lead_analytics(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get lead distributions, the most recent leads and the conversion rate."""
    return await run_report(
        "lead_analytics",
        aggregator.lead_analytics(),
        "Lead analytics retrieved successfully",
        "Error retrieving lead analytics",
    )


@router.get(
    "/sales",
    response_model=ApiResponse[SalesAnalytics],
    responses=FAILURE_RESPONSES,
)
async def get_sales_analytics(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get revenue and monthly sales for properties with status 'SOLD'."""
    return await run_report(
        "sales_analytics",
        aggregator.sales_analytics(),
        "Sales analytics retrieved successfully",
        "Error retrieving sales analytics",
    )


@router.get(
    "/users",
    response_model=ApiResponse[UserAnalytics],
    responses=FAILURE_RESPONSES,
)
async def get_user_analytics(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get role distribution and per-user lead/listing performance."""
    return await run_report(
        "user_analytics",
        aggregator.user_analytics(),
        "User analytics retrieved successfully",
        "Error retrieving user analytics",
    )


@router.get(
    "/activities",
    response_model=ApiResponse[list[Activity]],
    responses=FAILURE_RESPONSES,
)
async def get_recent_activities(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get the latest property and lead activity, newest first."""
    return await run_report(
        "recent_activities",
        aggregator.recent_activities(),
        "Recent activities retrieved successfully",
        "Error retrieving recent activities",
    )


@router.get(
    "/weekly-performance",
    response_model=ApiResponse[list[DayPerformance]],
    responses=FAILURE_RESPONSES,
)
async def get_weekly_performance(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get properties and leads created on each day of the current week."""
    return await run_report(
        "weekly_performance",
        aggregator.weekly_performance(),
        "Weekly performance data retrieved successfully",
        "Error retrieving weekly performance data",
    )


@router.get(
    "/monthly-trends",
    response_model=ApiResponse[list[MonthTrend]],
    responses=FAILURE_RESPONSES,
)
async def get_monthly_trends(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get activity and revenue for the last six months, oldest first."""
    return await run_report(
        "monthly_trends",
        aggregator.monthly_trends(),
        "Monthly trends retrieved successfully",
        "Error retrieving monthly trends",
    )


@router.get(
    "/top-properties",
    response_model=ApiResponse[TopProperties],
    responses=FAILURE_RESPONSES,
)
async def get_top_properties(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get the highest priced and the most viewed properties."""
    return await run_report(
        "top_properties",
        aggregator.top_properties(),
        "Top properties retrieved successfully",
        "Error retrieving top properties",
    )


@router.get(
    "/lead-conversion",
    response_model=ApiResponse[LeadConversion],
    responses=FAILURE_RESPONSES,
)
async def get_lead_conversion_rates(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get the global and per-designation lead conversion rates."""
    return await run_report(
        "lead_conversion",
        aggregator.lead_conversion_rates(),
        "Lead conversion rates retrieved successfully",
        "Error retrieving lead conversion rates",
    )


@router.get(
    "/financial-summary",
    response_model=ApiResponse[FinancialSummary],
    responses=FAILURE_RESPONSES,
)
async def get_financial_summary(principal: CurrentPrincipal, aggregator: Aggregator):
    """Get revenue totals and this year's monthly revenue."""
    return await run_report(
        "financial_summary",
        aggregator.financial_summary(),
        "Financial summary retrieved successfully",
        "Error retrieving financial summary",
    )
