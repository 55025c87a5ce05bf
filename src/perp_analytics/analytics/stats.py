"""Portfolio statistics aggregator."""

from __future__ import annotations

import math
from datetime import timezone, tzinfo
from typing import Sequence

from perp_analytics.analytics.metrics import (
    calculate_daily_pnl,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    round_money,
)
from perp_analytics.types import PortfolioStats, Trade

PROFIT_FACTOR_CAP = 999.0
# totalPnlPercent is measured against 10% of traded notional, an
# approximation of margin used rather than return on account balance.
CAPITAL_BASE_FRACTION = 0.1


def empty_portfolio_stats() -> PortfolioStats:
    return PortfolioStats()


def calculate_portfolio_stats(
    trades: Sequence[Trade],
    initial_balance: float = 0.0,
    tz: tzinfo = timezone.utc,
) -> PortfolioStats:
    """Summarize a trade set.

    Trades with pnl exactly zero count toward totals but are neither winners
    nor losers. Drawdown and Sharpe ratio come from the daily series built
    over the same trades.
    """
    if not trades:
        return empty_portfolio_stats()

    count = len(trades)
    winners = [trade.pnl for trade in trades if trade.pnl > 0]
    losers = [trade.pnl for trade in trades if trade.pnl < 0]
    long_count = sum(1 for trade in trades if trade.side == "LONG")

    total_pnl = sum(trade.pnl for trade in trades)
    total_volume = sum(trade.notional for trade in trades)
    total_fees = sum(trade.total_fees for trade in trades)
    gross_profit = sum(winners)
    gross_loss = abs(sum(losers))

    avg_win = gross_profit / len(winners) if winners else 0.0
    avg_loss = gross_loss / len(losers) if losers else 0.0

    daily = calculate_daily_pnl(trades, initial_balance, tz)
    capital_base = max(total_volume * CAPITAL_BASE_FRACTION, 1.0)

    return PortfolioStats(
        total_pnl=round_money(total_pnl),
        total_pnl_percent=round_money(total_pnl / capital_base * 100.0),
        win_rate=round(len(winners) / count * 100.0, 1),
        total_trades=count,
        winning_trades=len(winners),
        losing_trades=len(losers),
        avg_win=round_money(avg_win),
        avg_loss=round_money(avg_loss),
        largest_win=round_money(max(winners)) if winners else 0.0,
        largest_loss=round_money(min(losers)) if losers else 0.0,
        avg_trade_duration=_round_half_up(sum(t.duration_minutes for t in trades) / count),
        total_volume=round_money(total_volume),
        total_fees=round_money(total_fees),
        long_ratio=round(long_count / count * 100.0, 1),
        short_ratio=round((count - long_count) / count * 100.0, 1),
        profit_factor=_profit_factor(gross_profit, gross_loss),
        sharpe_ratio=round_money(calculate_sharpe_ratio(daily)),
        max_drawdown=round_money(calculate_max_drawdown(daily)),
    )


def _profit_factor(gross_profit: float, gross_loss: float) -> float:
    if gross_loss > 0:
        return round(gross_profit / gross_loss, 2)
    return PROFIT_FACTOR_CAP if gross_profit > 0 else 0.0


def _round_half_up(value: float) -> float:
    # 30.5 minutes reads as 31, not 30
    return float(math.floor(value + 0.5))
