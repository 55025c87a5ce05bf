"""Exchange fee schedule.

Taker orders (MARKET, STOP) pay ``TAKER_FEE_RATE`` of notional. Maker orders
(LIMIT) receive a rebate of ``MAKER_REBATE_RATIO`` of the taker fee, so the
maker rate is negative. Funding accrues per full 8-hour interval held.
"""

from __future__ import annotations

import math

from perp_analytics.types import FeeResult, OrderType

TAKER_FEE_RATE = 0.0005
MAKER_REBATE_RATIO = 0.125
MAKER_FEE_RATE = -(TAKER_FEE_RATE * MAKER_REBATE_RATIO)
DEFAULT_FUNDING_RATE = 0.0001

FUNDING_INTERVAL_MINUTES = 480
FEE_PRECISION = 6

_TAKER_ORDER_TYPES = frozenset({"MARKET", "STOP"})


def calculate_notional(size: float, price: float) -> float:
    """Gross exposure of a position."""
    if size <= 0:
        raise ValueError("size_must_be_positive")
    if price <= 0:
        raise ValueError("price_must_be_positive")
    return size * price


def calculate_taker_fee(size: float, price: float, rate: float = TAKER_FEE_RATE) -> float:
    return round(calculate_notional(size, price) * rate, FEE_PRECISION)


def calculate_maker_fee(size: float, price: float, rate: float = MAKER_FEE_RATE) -> float:
    """Maker fee; negative with the default rate (a rebate)."""
    return round(calculate_notional(size, price) * rate, FEE_PRECISION)


def calculate_funding_fee(
    size: float,
    price: float,
    funding_rate: float = DEFAULT_FUNDING_RATE,
    intervals: int = 1,
) -> float:
    return round(calculate_notional(size, price) * funding_rate * intervals, FEE_PRECISION)


def funding_intervals(duration_minutes: float) -> int:
    """Number of completed funding intervals; partial intervals do not count."""
    if duration_minutes <= 0:
        return 0
    return math.floor(duration_minutes / FUNDING_INTERVAL_MINUTES)


def is_taker(order_type: OrderType) -> bool:
    return order_type in _TAKER_ORDER_TYPES


def calculate_total_fees(
    size: float,
    price: float,
    order_type: OrderType,
    duration_minutes: float = 0,
    funding_rate: float = DEFAULT_FUNDING_RATE,
    *,
    taker_rate: float = TAKER_FEE_RATE,
    maker_rate: float = MAKER_FEE_RATE,
) -> FeeResult:
    """Compute the full fee breakdown for one trade.

    Exactly one of maker/taker fee is populated, chosen by order type.
    Funding is added on top whenever at least one interval was held.
    """
    if is_taker(order_type):
        taker_fee = calculate_taker_fee(size, price, taker_rate)
        maker_fee = 0.0
    else:
        taker_fee = 0.0
        maker_fee = calculate_maker_fee(size, price, maker_rate)

    intervals = funding_intervals(duration_minutes)
    funding_fee = (
        calculate_funding_fee(size, price, funding_rate, intervals) if intervals > 0 else 0.0
    )
    return FeeResult(
        maker_fee=maker_fee,
        taker_fee=taker_fee,
        funding_fee=funding_fee,
        total_fees=round(maker_fee + taker_fee + funding_fee, FEE_PRECISION),
    )
