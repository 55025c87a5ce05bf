"""Reproducible demo trade history."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from perp_analytics.fees import (
    DEFAULT_FUNDING_RATE,
    MAKER_FEE_RATE,
    TAKER_FEE_RATE,
    calculate_total_fees,
)
from perp_analytics.types import MarketType, OrderType, Side, Trade

SYMBOLS = ("SOL-PERP", "BTC-PERP", "ETH-PERP")
MARKET_TYPES: tuple[MarketType, ...] = ("PERP", "PERP", "PERP", "SPOT")
ORDER_TYPES: tuple[OrderType, ...] = ("MARKET", "LIMIT", "STOP")
SIDES: tuple[Side, ...] = ("LONG", "SHORT")
TAGS = ("breakout", "reversal", "scalp", "swing", "news", "trend", "range")

_WIN_PROBABILITY = 0.45


def _base_price(rng: random.Random, symbol: str) -> float:
    if symbol.startswith("BTC"):
        return rng.uniform(45_000, 55_000)
    if symbol.startswith("ETH"):
        return rng.uniform(2_800, 3_500)
    if symbol.startswith("SOL"):
        return rng.uniform(120, 180)
    return rng.uniform(5, 50)


def _size(rng: random.Random, symbol: str) -> float:
    if symbol.startswith("BTC"):
        return rng.uniform(0.01, 0.5)
    if symbol.startswith("ETH"):
        return rng.uniform(0.1, 5)
    return rng.uniform(1, 50)


def _generate_trade(
    rng: random.Random,
    trade_id: int,
    day: datetime,
    rates: dict[str, float],
) -> Trade:
    symbol = rng.choice(SYMBOLS)
    side = rng.choice(SIDES)
    order_type = rng.choice(ORDER_TYPES)
    entry_price = round(_base_price(rng, symbol), 2)
    size = round(_size(rng, symbol), 4)

    direction = 1 if side == "LONG" else -1
    edge = 1 if rng.random() < _WIN_PROBABILITY else -1
    move = edge * rng.uniform(0.002, 0.06) * entry_price
    exit_price = round(entry_price + direction * move, 2)
    pnl = (exit_price - entry_price) * size * direction
    pnl_percent = (exit_price - entry_price) / entry_price * 100 * direction

    entry_time = day.replace(hour=rng.randrange(0, 23), minute=rng.randrange(0, 59))
    duration = rng.randrange(5, 720)
    fees = calculate_total_fees(
        size,
        entry_price,
        order_type,
        duration,
        rates["funding"],
        taker_rate=rates["taker"],
        maker_rate=rates["maker"],
    )

    tags: frozenset[str] = frozenset()
    if rng.random() > 0.5:
        tags = frozenset({rng.choice(TAGS), rng.choice(TAGS)})
    notes = f"Trade note for {symbol}" if rng.random() > 0.7 else None

    return Trade(
        id=f"trade-{trade_id}",
        symbol=symbol,
        side=side,
        market_type=rng.choice(MARKET_TYPES),
        order_type=order_type,
        entry_price=entry_price,
        exit_price=exit_price,
        size=size,
        pnl=round(pnl, 2),
        pnl_percent=round(pnl_percent, 2),
        entry_time=entry_time,
        exit_time=entry_time + timedelta(minutes=duration),
        maker_fee=fees.maker_fee,
        taker_fee=fees.taker_fee,
        funding_fee=fees.funding_fee,
        notes=notes,
        tags=tags,
    )


def generate_trades(
    days: int = 90,
    *,
    seed: int | None = None,
    now: datetime | None = None,
    taker_rate: float = TAKER_FEE_RATE,
    maker_rate: float = MAKER_FEE_RATE,
    funding_rate: float = DEFAULT_FUNDING_RATE,
) -> list[Trade]:
    """Generate ``days + 1`` days of history, newest trade first.

    The same seed and ``now`` always produce the same trades.
    """
    if days < 0:
        raise ValueError("days_must_be_non_negative")
    rng = random.Random(seed)
    rates = {"taker": taker_rate, "maker": maker_rate, "funding": funding_rate}
    now = now or datetime.now(timezone.utc)
    trades: list[Trade] = []
    trade_id = 1
    for offset in range(days, -1, -1):
        day = now - timedelta(days=offset)
        for _ in range(rng.randrange(2, 8)):
            trades.append(_generate_trade(rng, trade_id, day, rates))
            trade_id += 1
    trades.sort(key=lambda trade: trade.entry_time, reverse=True)
    return trades


def guest_demo_trades(now: datetime | None = None) -> list[Trade]:
    """Small fixed showcase set for unauthenticated viewers."""
    now = now or datetime.now(timezone.utc)
    breakout_entry = now - timedelta(days=2)
    chop_entry = now - timedelta(hours=12)
    swing_entry = now - timedelta(days=5)
    return [
        Trade(
            id="demo-trade-2",
            symbol="SOL-PERP",
            side="SHORT",
            market_type="PERP",
            order_type="LIMIT",
            entry_price=145.20,
            exit_price=146.50,
            size=50,
            pnl=-65.00,
            pnl_percent=-0.89,
            entry_time=chop_entry,
            exit_time=chop_entry + timedelta(minutes=45),
            maker_fee=-0.45375,
            notes="Chopped out in a range. Should have waited for the break.",
            tags=frozenset({"range", "scalp"}),
        ),
        Trade(
            id="demo-trade-1",
            symbol="BTC-PERP",
            side="LONG",
            market_type="PERP",
            order_type="MARKET",
            entry_price=48_500.00,
            exit_price=51_200.00,
            size=0.5,
            pnl=1_350.00,
            pnl_percent=5.57,
            entry_time=breakout_entry,
            exit_time=breakout_entry + timedelta(minutes=180),
            taker_fee=12.125,
            notes="Perfect breakout setup on the 4H timeframe.",
            tags=frozenset({"breakout", "trend"}),
        ),
        Trade(
            id="demo-trade-3",
            symbol="ETH-PERP",
            side="LONG",
            market_type="PERP",
            order_type="STOP",
            entry_price=3_150.00,
            exit_price=3_080.00,
            size=2.0,
            pnl=-140.00,
            pnl_percent=-2.22,
            entry_time=swing_entry,
            exit_time=swing_entry + timedelta(minutes=1_020),
            taker_fee=3.15,
            funding_fee=1.26,
            tags=frozenset({"swing"}),
        ),
    ]
