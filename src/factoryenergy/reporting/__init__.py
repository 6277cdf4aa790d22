"""CSV and JSON reporting of dashboard views."""

from factoryenergy.reporting.csv_export import ReportThresholds, export_dashboard_csv, period_of_day
from factoryenergy.reporting.summary import DashboardSummary, build_dashboard_summary, summary_to_jsonable

__all__ = [
    "DashboardSummary",
    "ReportThresholds",
    "build_dashboard_summary",
    "export_dashboard_csv",
    "period_of_day",
    "summary_to_jsonable",
]
