"""Analytics package exports."""

from perp_analytics.analytics.dashboard import (
    DashboardReport,
    build_dashboard,
    dashboard_as_dict,
    derive_initial_balance,
)
from perp_analytics.analytics.metrics import (
    calculate_daily_pnl,
    calculate_fee_breakdown,
    calculate_heatmap_data,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    calculate_symbol_stats,
    calculate_volume_data,
)
from perp_analytics.analytics.stats import calculate_portfolio_stats, empty_portfolio_stats

__all__ = [
    "DashboardReport",
    "build_dashboard",
    "calculate_daily_pnl",
    "calculate_fee_breakdown",
    "calculate_heatmap_data",
    "calculate_max_drawdown",
    "calculate_portfolio_stats",
    "calculate_sharpe_ratio",
    "calculate_symbol_stats",
    "calculate_volume_data",
    "dashboard_as_dict",
    "derive_initial_balance",
    "empty_portfolio_stats",
]
