"""Dashboard feature module: metrics payload and chart drill-down."""

from linear_app.analytics.drilldown import resolve_drill_down
from linear_app.features.dashboard.context import DashboardMetrics, build_metrics

__all__ = [
    "DashboardMetrics",
    "build_metrics",
    "resolve_drill_down",
]
