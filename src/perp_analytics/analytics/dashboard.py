"""Full dashboard computation: filter, baseline, metrics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone, tzinfo
from time import perf_counter
from typing import Any, Iterable, Sequence

from perp_analytics.analytics.metrics import (
    calculate_daily_pnl,
    calculate_fee_breakdown,
    calculate_heatmap_data,
    calculate_symbol_stats,
    calculate_volume_data,
)
from perp_analytics.analytics.stats import calculate_portfolio_stats
from perp_analytics.filters import filter_trades
from perp_analytics.schemas import trade_as_row
from perp_analytics.types import (
    DailyPnL,
    FeeBreakdown,
    FilterState,
    HeatmapData,
    PortfolioStats,
    SymbolStats,
    Trade,
    VolumeData,
)
from perp_analytics.utils.logging import get_logger, log_metrics_computed


@dataclass(frozen=True, slots=True)
class DashboardReport:
    """Every display-ready output for one filter selection."""

    filters: FilterState
    initial_balance: float
    trades: list[Trade]
    daily_pnl: list[DailyPnL]
    stats: PortfolioStats
    fee_breakdown: FeeBreakdown
    volume_data: list[VolumeData]
    heatmap_data: list[HeatmapData]
    symbol_stats: list[SymbolStats]
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def derive_initial_balance(account_balance: float | None, trades: Sequence[Trade]) -> float:
    """Equity at the start of the period: current balance minus period pnl."""
    if account_balance is None:
        return 0.0
    return account_balance - sum(trade.pnl for trade in trades)


def build_dashboard(
    trades: Iterable[Trade],
    filters: FilterState | None = None,
    *,
    account_balance: float | None = None,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> DashboardReport:
    """Run the whole pipeline over one consistent trade snapshot."""
    logger = get_logger("perp_analytics.analytics.dashboard")
    started = perf_counter()
    filters = filters or FilterState()

    selected = filter_trades(trades, filters, now)
    initial_balance = derive_initial_balance(account_balance, selected)
    daily = calculate_daily_pnl(selected, initial_balance, tz)

    report = DashboardReport(
        filters=filters,
        initial_balance=initial_balance,
        trades=selected,
        daily_pnl=daily,
        stats=calculate_portfolio_stats(selected, initial_balance, tz),
        fee_breakdown=calculate_fee_breakdown(selected),
        volume_data=calculate_volume_data(selected, tz),
        heatmap_data=calculate_heatmap_data(selected, tz),
        symbol_stats=calculate_symbol_stats(selected),
    )
    log_metrics_computed(
        logger,
        trade_count=len(selected),
        day_count=len(daily),
        elapsed_ms=(perf_counter() - started) * 1000,
        symbol=filters.symbol,
        timeframe=filters.timeframe,
    )
    return report


def dashboard_as_dict(report: DashboardReport, *, include_trades: bool = False) -> dict[str, Any]:
    """JSON-safe rendering of a dashboard report."""
    payload: dict[str, Any] = {
        "generated_at": report.generated_at,
        "filters": asdict(report.filters),
        "initial_balance": round(report.initial_balance, 2),
        "stats": asdict(report.stats),
        "fee_breakdown": asdict(report.fee_breakdown),
        "daily_pnl": [asdict(row) for row in report.daily_pnl],
        "volume_data": [asdict(row) for row in report.volume_data],
        "heatmap_data": [asdict(row) for row in report.heatmap_data],
        "symbol_stats": [asdict(row) for row in report.symbol_stats],
    }
    if include_trades:
        payload["trades"] = [trade_as_row(trade) for trade in report.trades]
    return payload
