"""Pure reduction functions behind the dashboard reports.

Every function here works on already-fetched records and the current time,
so the reports can be tested without a database.
"""

import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from crm_dashboard.schemas import (
    Activity,
    DesignationConversion,
    FinancialSummary,
    LeadAnalytics,
    LeadConversion,
    LeadRecord,
    MonthlySales,
    OverviewReport,
    PropertyAnalytics,
    PropertyRecord,
    RecentLead,
    SalesAnalytics,
    TypeSales,
    UserAnalytics,
    UserPerformance,
    UserRecord,
)

UNKNOWN = "unknown"
SOLD = "SOLD"
CONVERTED_STATUSES = ("converted", "closed")

# (label, inclusive upper bound) in rupees; anything above the last bound is TOP_PRICE_BAND
PRICE_BANDS: tuple[tuple[str, int], ...] = (
    ("0-50L", 5_000_000),
    ("50L-1Cr", 10_000_000),
    ("1Cr-2Cr", 20_000_000),
    ("2Cr-5Cr", 50_000_000),
)
TOP_PRICE_BAND = "5Cr+"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# --- Field normalization ---------------------------------------------------


def resolve_display_name(value: Any, attr: str = "name") -> str | None:
    """Extract a display name from a plain string or a reference object.

    Status and type fields hold either the name itself or a reference
    (mapping or object) carrying it under ``attr``.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        name = value.get(attr)
    else:
        name = getattr(value, attr, None)
    return name if isinstance(name, str) else None


def normalize_status(value: Any) -> str:
    """Lowercase, trimmed category for a status-like field ('unknown' if absent)."""
    name = resolve_display_name(value)
    if not name or not name.strip():
        return UNKNOWN
    return name.strip().lower()


def to_number(value: Any) -> float:
    """Coerce a numeric field; absent, null or unparseable values count as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return 0.0 if math.isnan(number) or math.isinf(number) else number


def percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


def average(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def person_name(first: str | None, last: str | None, fallback: str | None = None) -> str:
    name = " ".join(part for part in (first, last) if part)
    return name or fallback or ""


def is_sold(prop: PropertyRecord) -> bool:
    """Case and whitespace insensitive sold check."""
    return normalize_status(prop.property_status) == "sold"


def is_exactly_sold(prop: PropertyRecord) -> bool:
    """Literal 'SOLD' check used by the sales, user and financial reports."""
    return prop.property_status == SOLD


def is_converted(lead: LeadRecord) -> bool:
    return normalize_status(lead.lead_status) in CONVERTED_STATUSES


def type_name(prop: PropertyRecord) -> str:
    return resolve_display_name(prop.property_type, "type_name") or UNKNOWN


def frequencies(values: Iterable[str]) -> dict[str, int]:
    return dict(Counter(values))


# --- Price and time buckets ------------------------------------------------


def price_band(price: Any) -> str:
    """Price band label; a price equal to a boundary falls into the lower band."""
    amount = to_number(price)
    for label, upper in PRICE_BANDS:
        if amount <= upper:
            return label
    return TOP_PRICE_BAND


def empty_price_ranges() -> dict[str, int]:
    ranges = {label: 0 for label, _ in PRICE_BANDS}
    ranges[TOP_PRICE_BAND] = 0
    return ranges


def month_start(moment: datetime, offset: int = 0) -> datetime:
    """First instant of the month ``offset`` months away from ``moment``."""
    index = moment.year * 12 + (moment.month - 1) + offset
    return datetime(index // 12, index % 12 + 1, 1, tzinfo=timezone.utc)


def month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


def trailing_months(now: datetime, months: int) -> list[tuple[datetime, datetime]]:
    """Half-open month ranges, current month first, going back ``months`` months."""
    return [
        (month_start(now, -i), month_start(now, -i + 1))
        for i in range(months)
    ]


def week_start(now: datetime) -> datetime:
    """Midnight of the week's Monday, as ``currentDay - dayIndex + 1``.

    ``dayIndex`` counts from Sunday (0) to Saturday (6), so on a Sunday the
    result is the following Monday.
    """
    day_index = (now.weekday() + 1) % 7
    start = now - timedelta(days=day_index - 1)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def week_days(now: datetime) -> list[tuple[datetime, datetime]]:
    """Seven half-open day ranges starting at :func:`week_start`."""
    start = week_start(now)
    return [
        (start + timedelta(days=i), start + timedelta(days=i + 1))
        for i in range(7)
    ]


def sale_time(prop: PropertyRecord) -> datetime | None:
    return prop.updated_at or prop.created_at


def seed_monthly_sales(now: datetime, months: int) -> dict[str, MonthlySales]:
    """Zeroed buckets for the trailing ``months`` months, current month first."""
    return {
        month_key(start): MonthlySales()
        for start, _ in trailing_months(now, months)
    }


# --- Reports ---------------------------------------------------------------


def summarize_overview(
    properties: Sequence[PropertyRecord],
    leads: Sequence[LeadRecord],
    total_users: int,
    average_rating: float,
) -> OverviewReport:
    sold = [prop for prop in properties if is_sold(prop)]

    return OverviewReport(
        total_properties=len(properties),
        sold_properties=len(sold),
        unsold_properties=len(properties) - len(sold),
        total_sales=sum(to_number(prop.price) for prop in sold),
        total_leads=len(leads),
        total_users=total_users,
        active_leads=sum(1 for lead in leads if normalize_status(lead.lead_status) == "active"),
        pending_followups=sum(
            1 for lead in leads if normalize_status(lead.follow_up_status) == "pending"
        ),
        average_rating=average_rating,
    )


def summarize_properties(
    properties: Sequence[PropertyRecord],
    now: datetime,
    recent_window_days: int,
) -> PropertyAnalytics:
    recent_since = now - timedelta(days=recent_window_days)
    price_ranges = empty_price_ranges()
    type_sales: dict[str, TypeSales] = {}
    total_value = 0.0

    for prop in properties:
        price = to_number(prop.price)
        total_value += price
        price_ranges[price_band(price)] += 1

        rollup = type_sales.setdefault(type_name(prop), TypeSales())
        rollup.total_sales += price
        rollup.count += 1

    for rollup in type_sales.values():
        rollup.average_price = average(rollup.total_sales, rollup.count)

    # sorted() is stable, so equal totals keep first-seen order
    ranked = dict(sorted(type_sales.items(), key=lambda item: item[1].total_sales, reverse=True))

    statuses = [normalize_status(prop.property_status) for prop in properties]

    return PropertyAnalytics(
        total_properties=len(properties),
        sold_properties=statuses.count("sold"),
        active_properties=statuses.count("active"),
        total_value=total_value,
        recent_properties=sum(
            1 for prop in properties
            if prop.created_at is not None and prop.created_at >= recent_since
        ),
        status_distribution=frequencies(statuses),
        type_distribution=frequencies(type_name(prop) for prop in properties),
        price_ranges=price_ranges,
        property_type_sales=ranked,
        average_price=average(total_value, len(properties)),
    )


def newest_first(records: Iterable[Any]) -> list[Any]:
    """Sort records by ``created_at`` descending; undated records go last."""
    return sorted(records, key=lambda record: record.created_at or _EPOCH, reverse=True)


def summarize_leads(
    leads: Sequence[LeadRecord],
    now: datetime,
    recent_window_days: int,
    recent_limit: int,
) -> LeadAnalytics:
    recent_since = now - timedelta(days=recent_window_days)
    converted = sum(1 for lead in leads if is_converted(lead))

    recent_list = [
        RecentLead(
            id=lead.id,
            name=person_name(lead.first_name, lead.last_name, lead.full_name),
            email=lead.email,
            phone=lead.phone,
            status=normalize_status(lead.lead_status),
            designation=lead.lead_designation or UNKNOWN,
            created_at=lead.created_at,
        )
        for lead in newest_first(leads)[:recent_limit]
    ]

    return LeadAnalytics(
        total_leads=len(leads),
        status_distribution=frequencies(normalize_status(lead.lead_status) for lead in leads),
        designation_distribution=frequencies(
            lead.lead_designation or UNKNOWN for lead in leads
        ),
        follow_up_distribution=frequencies(
            normalize_status(lead.follow_up_status) for lead in leads
        ),
        recent_leads=sum(
            1 for lead in leads
            if lead.created_at is not None and lead.created_at >= recent_since
        ),
        recent_leads_list=recent_list,
        converted_leads=converted,
        conversion_rate=percentage(converted, len(leads)),
    )


def summarize_sales(
    sold: Sequence[PropertyRecord],
    now: datetime,
    months: int,
) -> SalesAnalytics:
    monthly = seed_monthly_sales(now, months)

    for prop in sold:
        moment = sale_time(prop)
        if moment is None:
            continue
        bucket = monthly.get(month_key(moment))
        if bucket is None:
            continue
        bucket.count += 1
        bucket.revenue += to_number(prop.price)

    total_revenue = sum(to_number(prop.price) for prop in sold)

    return SalesAnalytics(
        total_sales=len(sold),
        total_revenue=total_revenue,
        average_sale_price=average(total_revenue, len(sold)),
        monthly_sales=monthly,
    )


def summarize_users(
    users: Sequence[UserRecord],
    leads: Sequence[LeadRecord],
    properties: Sequence[PropertyRecord],
) -> UserAnalytics:
    performance = []
    for user in users:
        user_leads = [lead for lead in leads if lead.assigned_to == user.id]
        user_properties = [prop for prop in properties if prop.created_by_user_id == user.id]

        performance.append(UserPerformance(
            user_id=user.id,
            user_name=person_name(user.first_name, user.last_name),
            total_leads=len(user_leads),
            active_leads=sum(
                1 for lead in user_leads if normalize_status(lead.lead_status) == "active"
            ),
            total_properties=len(user_properties),
            sold_properties=sum(1 for prop in user_properties if is_exactly_sold(prop)),
        ))

    return UserAnalytics(
        total_users=len(users),
        role_distribution=frequencies(
            resolve_display_name(user.role) or UNKNOWN for user in users
        ),
        user_performance=performance,
    )


def property_activity(prop: PropertyRecord) -> Activity:
    kind = resolve_display_name(prop.property_type, "type_name") or "Property"
    return Activity(
        type="property",
        title="Property Sold" if is_exactly_sold(prop) else "Property Listed",
        subtitle=prop.name or "",
        description=f"{kind} - {prop.property_status or UNKNOWN}",
        time=prop.created_at,
        data=prop.model_dump(mode="json", by_alias=True),
    )


def lead_activity(lead: LeadRecord) -> Activity:
    name = lead.full_name or person_name(lead.first_name, lead.last_name)
    status = resolve_display_name(lead.lead_status) or UNKNOWN
    return Activity(
        type="lead",
        title="New Lead Added",
        subtitle=f"{name} - {lead.lead_designation or UNKNOWN}",
        description=f"Lead status: {status}",
        time=lead.created_at,
        data=lead.model_dump(mode="json", by_alias=True),
    )


def build_activity_feed(
    properties: Sequence[PropertyRecord],
    leads: Sequence[LeadRecord],
    limit: int,
) -> list[Activity]:
    """Merge property and lead activities, newest first, capped at ``limit``."""
    activities = [property_activity(prop) for prop in properties]
    activities.extend(lead_activity(lead) for lead in leads)
    activities.sort(key=lambda activity: activity.time or _EPOCH, reverse=True)
    return activities[:limit]


def summarize_conversion(leads: Sequence[LeadRecord]) -> LeadConversion:
    """Conversion on the raw stored status.

    Only plain-string statuses equal to 'converted' or 'closed' count here;
    reference objects and differently cased values do not.
    """

    def converted(lead: LeadRecord) -> bool:
        return isinstance(lead.lead_status, str) and lead.lead_status in CONVERTED_STATUSES

    by_designation: dict[str, list[LeadRecord]] = {}
    for lead in leads:
        by_designation.setdefault(lead.lead_designation or UNKNOWN, []).append(lead)

    breakdown = {}
    for designation, group in by_designation.items():
        count = sum(1 for lead in group if converted(lead))
        breakdown[designation] = DesignationConversion(
            total=len(group),
            converted=count,
            rate=percentage(count, len(group)),
        )

    total_converted = sum(1 for lead in leads if converted(lead))

    return LeadConversion(
        total_leads=len(leads),
        converted_leads=total_converted,
        conversion_rate=percentage(total_converted, len(leads)),
        designation_conversion=breakdown,
    )


def summarize_financials(sold: Sequence[PropertyRecord], now: datetime) -> FinancialSummary:
    total_revenue = sum(to_number(prop.price) for prop in sold)

    monthly_revenue: dict[int, float] = {}
    year_start = datetime(now.year, 1, 1, tzinfo=timezone.utc)
    for month in range(1, 13):
        start = month_start(year_start, month - 1)
        end = month_start(year_start, month)
        monthly_revenue[month] = sum(
            to_number(prop.price)
            for prop in sold
            if (moment := sale_time(prop)) is not None and start <= moment < end
        )

    return FinancialSummary(
        total_revenue=total_revenue,
        average_sale_price=average(total_revenue, len(sold)),
        total_sales=len(sold),
        monthly_revenue=monthly_revenue,
    )
