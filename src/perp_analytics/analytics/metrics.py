"""Metric primitives over a trade set.

Every function here is pure: it takes already-filtered trades and returns
freshly built value objects. Date, hour and weekday buckets are taken from
``entry_time`` converted to one reference timezone (UTC unless given).
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime, timezone, tzinfo
from statistics import fmean, stdev
from typing import Iterable, Sequence

from perp_analytics.types import (
    DailyPnL,
    FeeBreakdown,
    HeatmapData,
    SymbolStats,
    Trade,
    VolumeData,
)

TRADING_DAYS_PER_YEAR = 252
ZERO_TOLERANCE = 0.005
MAX_DRAWDOWN_PERCENT = 100.0


def calculate_daily_pnl(
    trades: Iterable[Trade],
    initial_balance: float = 0.0,
    tz: tzinfo = timezone.utc,
) -> list[DailyPnL]:
    """Build the daily pnl / equity / drawdown series.

    Drawdown is measured from the running peak of ``initial_balance`` plus
    cumulative pnl, as a percentage of that peak. It is capped at 100 once
    equity falls to zero or below.
    """
    daily: dict[str, list[float]] = defaultdict(list)
    for trade in trades:
        daily[date_key(trade.entry_time, tz)].append(trade.pnl)

    starting_equity = initial_balance if initial_balance > 0 else 0.0
    peak_equity = starting_equity
    cumulative_pnl = 0.0
    series: list[DailyPnL] = []

    for date in sorted(daily):
        pnls = daily[date]
        day_pnl = sum(pnls)
        cumulative_pnl += day_pnl
        current_equity = starting_equity + cumulative_pnl
        peak_equity = max(peak_equity, current_equity)

        drawdown = 0.0
        if peak_equity > 0:
            drawdown = (peak_equity - current_equity) / peak_equity * 100.0
            drawdown = min(drawdown, MAX_DRAWDOWN_PERCENT)

        series.append(
            DailyPnL(
                date=date,
                pnl=round_money(day_pnl),
                cumulative_pnl=round_money(cumulative_pnl),
                drawdown=round_money(drawdown),
                trades=len(pnls),
            )
        )
    return series


def calculate_sharpe_ratio(daily_pnl: Sequence[DailyPnL]) -> float:
    """Annualized Sharpe ratio of daily pnl.

    Computed over raw daily pnl in currency units, not over returns on
    equity: ``mean / sample_stddev * sqrt(252)``.
    """
    if len(daily_pnl) < 2:
        return 0.0
    values = [day.pnl for day in daily_pnl]
    deviation = stdev(values)
    if deviation == 0:
        return 0.0
    return fmean(values) / deviation * math.sqrt(TRADING_DAYS_PER_YEAR)


def calculate_max_drawdown(daily_pnl: Sequence[DailyPnL]) -> float:
    if not daily_pnl:
        return 0.0
    return max(day.drawdown for day in daily_pnl)


def calculate_fee_breakdown(trades: Iterable[Trade]) -> FeeBreakdown:
    maker = taker = funding = 0.0
    for trade in trades:
        maker += trade.maker_fee
        taker += trade.taker_fee
        funding += trade.funding_fee
    return FeeBreakdown(
        maker=round_money(maker),
        taker=round_money(taker),
        funding=round_money(funding),
        total=round_money(maker + taker + funding),
    )


def calculate_volume_data(
    trades: Iterable[Trade],
    tz: tzinfo = timezone.utc,
) -> list[VolumeData]:
    """Notional volume and trade count per entry date, oldest first."""
    volume: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for trade in trades:
        key = date_key(trade.entry_time, tz)
        volume[key] += trade.notional
        counts[key] += 1
    return [
        VolumeData(date=key, volume=round_money(volume[key]), trades=counts[key])
        for key in sorted(volume)
    ]


def calculate_heatmap_data(
    trades: Iterable[Trade],
    tz: tzinfo = timezone.utc,
) -> list[HeatmapData]:
    """Pnl per weekday x hour cell; empty cells are omitted.

    ``day_of_week`` counts from Sunday (0 is Sunday, 6 is Saturday). Cells
    are emitted in weekday-then-hour order.
    """
    pnl: dict[tuple[int, int], float] = defaultdict(float)
    counts: dict[tuple[int, int], int] = defaultdict(int)
    for trade in trades:
        local = to_reference(trade.entry_time, tz)
        cell = (sunday_based_weekday(local), local.hour)
        pnl[cell] += trade.pnl
        counts[cell] += 1
    return [
        HeatmapData(
            hour=hour,
            day_of_week=day,
            pnl=round_money(pnl[(day, hour)]),
            trades=counts[(day, hour)],
        )
        for day, hour in sorted(pnl)
    ]


def calculate_symbol_stats(trades: Iterable[Trade]) -> list[SymbolStats]:
    """Per-symbol totals, best pnl first."""
    by_symbol: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        by_symbol[trade.symbol].append(trade)

    rows = []
    for symbol, symbol_trades in by_symbol.items():
        wins = sum(1 for trade in symbol_trades if trade.pnl > 0)
        rows.append(
            SymbolStats(
                symbol=symbol,
                trades=len(symbol_trades),
                pnl=round_money(sum(trade.pnl for trade in symbol_trades)),
                win_rate=round(wins / len(symbol_trades) * 100.0, 1),
                volume=round_money(sum(trade.notional for trade in symbol_trades)),
            )
        )
    rows.sort(key=lambda row: row.pnl, reverse=True)
    return rows


def round_money(value: float) -> float:
    """Round to cents, collapsing near-zero values (and -0.0) to 0.0."""
    if abs(value) < ZERO_TOLERANCE:
        return 0.0
    return round(value, 2)


def to_reference(moment: datetime, tz: tzinfo) -> datetime:
    # naive timestamps are UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def sunday_based_weekday(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def date_key(moment: datetime, tz: tzinfo) -> str:
    return to_reference(moment, tz).date().isoformat()
