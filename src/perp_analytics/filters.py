"""Trade selection by symbol, order type, side and timeframe."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from perp_analytics.types import FilterState, Timeframe, Trade

TradePredicate = Callable[[Trade], bool]

ALL = "all"

# None means no lower bound on entry time.
TIMEFRAME_DAYS: dict[Timeframe, int | None] = {
    "7D": 7,
    "30D": 30,
    "90D": 90,
    "ALL": None,
}


def timeframe_cutoff(timeframe: Timeframe, now: datetime) -> datetime | None:
    """Earliest entry time still inside the timeframe."""
    if timeframe not in TIMEFRAME_DAYS:
        raise ValueError(f"unsupported_timeframe: {timeframe}")
    days = TIMEFRAME_DAYS[timeframe]
    if days is None:
        return None
    return _as_utc(now) - timedelta(days=days)


def build_predicates(filters: FilterState, now: datetime) -> list[TradePredicate]:
    """Translate a filter selection into trade predicates."""
    predicates: list[TradePredicate] = []
    if filters.symbol != ALL:
        predicates.append(lambda trade: trade.symbol == filters.symbol)
    if filters.order_type != ALL:
        predicates.append(lambda trade: trade.order_type == filters.order_type)
    if filters.side != ALL:
        predicates.append(lambda trade: trade.side == filters.side)

    cutoff = timeframe_cutoff(filters.timeframe, now)
    if cutoff is not None:
        predicates.append(lambda trade: _as_utc(trade.entry_time) >= cutoff)
    return predicates


def filter_trades(
    trades: Iterable[Trade],
    filters: FilterState,
    now: datetime | None = None,
) -> list[Trade]:
    """Return trades matching every active filter, preserving input order."""
    predicates = build_predicates(filters, now or datetime.now(timezone.utc))
    return [trade for trade in trades if all(check(trade) for check in predicates)]


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
