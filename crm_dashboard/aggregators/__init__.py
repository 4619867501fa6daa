"""Report aggregation logic for the dashboard."""

from crm_dashboard.aggregators.report_aggregator import Clock, ReportAggregator

__all__ = [
    "Clock",
    "ReportAggregator",
]
