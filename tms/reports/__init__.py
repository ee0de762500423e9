"""Dashboard and report statistics."""

from tms.reports.dashboard import DashboardStats, MonthlyCount, OnTimeStats, build_dashboard

__all__ = ["DashboardStats", "MonthlyCount", "OnTimeStats", "build_dashboard"]
