"""Poultry Reports - read-only summaries and CSV exports of a FarmState."""

from poultry_reports.export import (
    EXPORTERS,
    export_egg_sales,
    export_feed_purchases,
    export_transactions,
)
from poultry_reports.summary import (
    UNKNOWN_FLOCK,
    CashTotals,
    DashboardSnapshot,
    FlockSummary,
    MonthlyFigures,
    ProductionStats,
    ProfitAndLoss,
    SalesStats,
    cash_totals,
    dashboard,
    feed_cost_by_type,
    flock_label,
    flock_summaries,
    monthly_breakdown,
    production_stats,
    profit_and_loss,
    sales_stats,
)

__all__ = [
    "EXPORTERS",
    "UNKNOWN_FLOCK",
    "CashTotals",
    "DashboardSnapshot",
    "FlockSummary",
    "MonthlyFigures",
    "ProductionStats",
    "ProfitAndLoss",
    "SalesStats",
    "cash_totals",
    "dashboard",
    "export_egg_sales",
    "export_feed_purchases",
    "export_transactions",
    "feed_cost_by_type",
    "flock_label",
    "flock_summaries",
    "monthly_breakdown",
    "production_stats",
    "profit_and_loss",
    "sales_stats",
]
