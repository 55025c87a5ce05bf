from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from perp_analytics.schemas import (
    TradeParseError,
    TradePayload,
    parse_trade,
    parse_trades,
    trade_as_row,
)


def _raw(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "trade-1",
        "symbol": "BTC-PERP",
        "side": "long",
        "marketType": "PERP",
        "orderType": "LIMIT",
        "entryPrice": 48_500.0,
        "exitPrice": 49_000.0,
        "size": 0.5,
        "notional": 24_250.0,
        "pnl": 250.0,
        "pnlPercent": 1.03,
        "entryTime": "2024-01-01T10:00:00Z",
        "exitTime": "2024-01-01T19:00:00Z",
        "duration": 540,
        "makerFee": -1.515625,
        "takerFee": 0,
        "fundingFee": 2.425,
        "totalFees": 0.909375,
        "tags": ["breakout", "trend", "breakout"],
    }
    row.update(overrides)
    return row


def test_parses_camel_case_record() -> None:
    trade = parse_trade(_raw())
    assert trade.side == "LONG"
    assert trade.order_type == "LIMIT"
    assert trade.entry_time == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
    assert trade.duration_minutes == 540
    assert trade.notional == pytest.approx(24_250.0)
    assert trade.total_fees == pytest.approx(-1.515625 + 2.425)
    assert trade.tags == frozenset({"breakout", "trend"})


def test_parses_snake_case_record_with_naive_times() -> None:
    trade = parse_trade(
        {
            "id": "t2",
            "symbol": "SOL-PERP",
            "side": "SHORT",
            "order_type": "MARKET",
            "entry_price": 150,
            "exit_price": 140,
            "size": 3,
            "pnl": 30,
            "entry_time": "2024-01-02T08:00:00",
            "exit_time": "2024-01-02T09:00:00",
            "tags": "scalp; news",
        }
    )
    assert trade.entry_time.tzinfo is not None
    assert trade.market_type == "PERP"
    assert trade.tags == frozenset({"scalp", "news"})


def test_rejects_unknown_order_type() -> None:
    with pytest.raises(TradeParseError, match="invalid_trade"):
        parse_trade(_raw(orderType="ICEBERG"))


def test_rejects_exit_before_entry() -> None:
    with pytest.raises(TradeParseError, match="exit_before_entry"):
        parse_trade(_raw(exitTime="2023-12-31T00:00:00Z"))


def test_rejects_both_maker_and_taker_fee() -> None:
    with pytest.raises(TradeParseError, match="maker_and_taker_fee_both_set"):
        parse_trade(_raw(takerFee=0.5))


def test_parse_trades_names_failing_row() -> None:
    rows = [_raw(id="ok"), _raw(id="bad", side="SIDEWAYS")]
    with pytest.raises(TradeParseError, match="row 1"):
        parse_trades(rows)


def test_trade_row_round_trip() -> None:
    trade = parse_trade(_raw())
    row = trade_as_row(trade)
    assert row["entry_time"].startswith("2024-01-01T10:00:00")
    assert row["total_fees"] == pytest.approx(trade.total_fees)
    assert parse_trade(row) == trade


def test_payload_from_trade_keeps_annotation() -> None:
    entry = datetime(2024, 1, 1, tzinfo=timezone.utc)
    trade = parse_trade(_raw(notes="held through funding", entryTime=entry.isoformat()))
    payload = TradePayload.from_trade(trade)
    assert payload.notes == "held through funding"
    assert payload.tags == ["breakout", "trend"]
    assert payload.exit_time - payload.entry_time == timedelta(hours=19)
