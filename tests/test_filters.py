from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from perp_analytics.filters import build_predicates, filter_trades, timeframe_cutoff
from perp_analytics.types import FilterState, OrderType, Side, Trade

NOW = datetime(2024, 3, 31, 12, tzinfo=timezone.utc)


def _trade(
    trade_id: str,
    days_ago: float,
    *,
    symbol: str = "BTC-PERP",
    side: Side = "LONG",
    order_type: OrderType = "MARKET",
) -> Trade:
    entry = NOW - timedelta(days=days_ago)
    return Trade(
        id=trade_id,
        symbol=symbol,
        side=side,
        market_type="PERP",
        order_type=order_type,
        entry_price=100.0,
        exit_price=101.0,
        size=1.0,
        pnl=1.0,
        pnl_percent=1.0,
        entry_time=entry,
        exit_time=entry + timedelta(minutes=5),
    )


TRADES = [
    _trade("recent-btc", 1, symbol="BTC-PERP", side="LONG", order_type="MARKET"),
    _trade("recent-sol", 3, symbol="SOL-PERP", side="SHORT", order_type="LIMIT"),
    _trade("month-eth", 20, symbol="ETH-PERP", side="LONG", order_type="STOP"),
    _trade("quarter-btc", 60, symbol="BTC-PERP", side="SHORT", order_type="LIMIT"),
    _trade("old-btc", 200, symbol="BTC-PERP", side="LONG", order_type="MARKET"),
]


def _ids(trades: list[Trade]) -> list[str]:
    return [trade.id for trade in trades]


def test_default_filter_is_thirty_days() -> None:
    assert _ids(filter_trades(TRADES, FilterState(), NOW)) == [
        "recent-btc",
        "recent-sol",
        "month-eth",
    ]


@pytest.mark.parametrize(
    ("timeframe", "expected"),
    [("7D", 2), ("30D", 3), ("90D", 4), ("ALL", 5)],
)
def test_timeframes(timeframe: str, expected: int) -> None:
    filters = FilterState(timeframe=timeframe)  # type: ignore[arg-type]
    assert len(filter_trades(TRADES, filters, NOW)) == expected


def test_symbol_side_and_order_type_compose() -> None:
    filters = FilterState(symbol="BTC-PERP", timeframe="ALL", side="LONG", order_type="MARKET")
    assert _ids(filter_trades(TRADES, filters, NOW)) == ["recent-btc", "old-btc"]

    filters = FilterState(symbol="BTC-PERP", timeframe="ALL", side="SHORT")
    assert _ids(filter_trades(TRADES, filters, NOW)) == ["quarter-btc"]


def test_no_match_returns_empty() -> None:
    filters = FilterState(symbol="ARB-PERP", timeframe="ALL")
    assert filter_trades(TRADES, filters, NOW) == []


def test_all_filters_pass_through_produce_only_time_predicate() -> None:
    assert len(build_predicates(FilterState(), NOW)) == 1
    assert build_predicates(FilterState(timeframe="ALL"), NOW) == []


def test_cutoff_is_inclusive() -> None:
    cutoff = timeframe_cutoff("7D", NOW)
    assert cutoff == NOW - timedelta(days=7)
    edge = _trade("edge", 7)
    assert filter_trades([edge], FilterState(timeframe="7D"), NOW) == [edge]
    assert timeframe_cutoff("ALL", NOW) is None


def test_unknown_timeframe_rejected() -> None:
    with pytest.raises(ValueError):
        timeframe_cutoff("1Y", NOW)  # type: ignore[arg-type]


def test_input_not_mutated() -> None:
    trades = list(TRADES)
    filter_trades(trades, FilterState(symbol="SOL-PERP"), NOW)
    assert trades == TRADES
