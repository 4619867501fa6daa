"""Dashboard report builder: fetch from the CRM store, reduce in memory."""

from collections.abc import Callable
from datetime import datetime

import structlog

from crm_dashboard.aggregators import reducers
from crm_dashboard.core.config import Settings, get_settings
from crm_dashboard.core.security import Principal
from crm_dashboard.schemas import (
    Activity,
    DayPerformance,
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

Clock = Callable[[], datetime]


class ReportAggregator:
    """Builds dashboard reports for one request.

    Each method fetches what it needs through the store and reduces it with
    the functions in :mod:`crm_dashboard.aggregators.reducers`. Nothing is
    cached between calls; the clock is injectable so time buckets can be
    tested deterministically.

    Usage:
        aggregator = ReportAggregator(CRMStore(session))
        overview = await aggregator.overview()
    """

    def __init__(
        self,
        store: CRMStore,
        settings: Settings | None = None,
        clock: Clock = reducers.utc_now,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock

    async def overview(self, principal: Principal | None = None) -> OverviewReport:
        """Headline counts; sold means a normalized status of 'sold'."""
        if principal is not None:
            logger.debug(
                "Building overview",
                user_id=principal.user_id,
                role=principal.role,
            )

        properties = await self._store.find_properties()
        leads = await self._store.find_leads()
        total_users = await self._store.count_users()

        report = reducers.summarize_overview(
            properties,
            leads,
            total_users=total_users,
            average_rating=self._settings.average_rating,
        )
        logger.debug(
            "Overview built",
            total_properties=report.total_properties,
            sold_properties=report.sold_properties,
            total_sales=report.total_sales,
        )
        return report

    async def property_analytics(self) -> PropertyAnalytics:
        properties = await self._store.find_properties(populate_type=True)
        return reducers.summarize_properties(
            properties,
            now=self._clock(),
            recent_window_days=self._settings.recent_window_days,
        )

    async def lead_analytics(self) -> LeadAnalytics:
        leads = await self._store.find_leads()
        return reducers.summarize_leads(
            leads,
            now=self._clock(),
            recent_window_days=self._settings.recent_window_days,
            recent_limit=self._settings.recent_leads_limit,
        )

    async def sales_analytics(self) -> SalesAnalytics:
        """Sales of properties stored with the exact status 'SOLD'."""
        sold = await self._store.find_properties(status=reducers.SOLD)
        return reducers.summarize_sales(
            sold,
            now=self._clock(),
            months=self._settings.sales_months,
        )

    async def user_analytics(self) -> UserAnalytics:
        users = await self._store.find_users(populate_role=True)
        leads = await self._store.find_leads()
        properties = await self._store.find_properties()
        return reducers.summarize_users(users, leads, properties)

    async def recent_activities(self) -> list[Activity]:
        limit = self._settings.activity_source_limit
        properties = await self._store.find_properties(
            order_by="created_at",
            limit=limit,
            populate_type=True,
        )
        leads = await self._store.find_leads(order_by="created_at", limit=limit)
        return reducers.build_activity_feed(
            properties,
            leads,
            limit=self._settings.activity_feed_limit,
        )

    async def weekly_performance(self) -> list[DayPerformance]:
        """Properties and leads created on each day of the current week."""
        week = []
        for day_start, day_end in reducers.week_days(self._clock()):
            properties = await self._store.count_properties(created_between=(day_start, day_end))
            leads = await self._store.count_leads(created_between=(day_start, day_end))
            week.append(DayPerformance(
                day=day_start.strftime("%Y-%m-%d"),
                day_name=day_start.strftime("%a"),
                properties=properties,
                leads=leads,
                total=properties + leads,
            ))
        return week

    async def monthly_trends(self) -> list[MonthTrend]:
        """Per-month activity and revenue, oldest month first."""
        trends = []
        months = reducers.trailing_months(self._clock(), self._settings.trend_months)
        for month_start, month_end in months:
            properties = await self._store.count_properties(
                created_between=(month_start, month_end),
            )
            leads = await self._store.count_leads(created_between=(month_start, month_end))
            sold = await self._store.find_properties(
                status=reducers.SOLD,
                updated_between=(month_start, month_end),
            )
            trends.append(MonthTrend(
                month=reducers.month_key(month_start),
                month_name=month_start.strftime("%B %Y"),
                properties=properties,
                leads=leads,
                sold_properties=len(sold),
                revenue=sum(reducers.to_number(prop.price) for prop in sold),
            ))

        trends.reverse()
        return trends

    async def top_properties(self) -> TopProperties:
        limit = self._settings.top_properties_limit
        by_price = await self._store.find_properties(
            order_by="price",
            limit=limit,
            populate_type=True,
        )
        by_views = await self._store.find_properties(
            order_by="views",
            limit=limit,
            populate_type=True,
        )
        return TopProperties(top_by_price=by_price, top_by_views=by_views)

    async def lead_conversion_rates(self) -> LeadConversion:
        leads = await self._store.find_leads()
        return reducers.summarize_conversion(leads)

    async def financial_summary(self) -> FinancialSummary:
        sold = await self._store.find_properties(status=reducers.SOLD)
        return reducers.summarize_financials(sold, now=self._clock())
