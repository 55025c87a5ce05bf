from __future__ import annotations

import pytest

from perp_analytics.fees import (
    DEFAULT_FUNDING_RATE,
    MAKER_FEE_RATE,
    calculate_funding_fee,
    calculate_maker_fee,
    calculate_notional,
    calculate_taker_fee,
    calculate_total_fees,
    funding_intervals,
)


def test_market_order_pays_taker_fee() -> None:
    fees = calculate_total_fees(1, 100, "MARKET")
    assert fees.taker_fee == pytest.approx(0.05)
    assert fees.maker_fee == 0.0
    assert fees.funding_fee == 0.0
    assert fees.total_fees == pytest.approx(0.05)


def test_limit_order_earns_maker_rebate() -> None:
    fees = calculate_total_fees(1, 100, "LIMIT")
    assert fees.maker_fee == pytest.approx(-0.00625)
    assert fees.taker_fee == 0.0
    assert MAKER_FEE_RATE < 0


def test_stop_order_is_taker() -> None:
    fees = calculate_total_fees(2, 50, "STOP")
    assert fees.taker_fee == pytest.approx(0.05)
    assert fees.maker_fee == 0.0


@pytest.mark.parametrize(
    ("duration", "intervals"),
    [(0, 0), (479, 0), (480, 1), (959, 1), (960, 2)],
)
def test_funding_accrues_per_full_interval(duration: int, intervals: int) -> None:
    assert funding_intervals(duration) == intervals
    fees = calculate_total_fees(1, 100, "MARKET", duration)
    assert fees.funding_fee == pytest.approx(100 * DEFAULT_FUNDING_RATE * intervals)


def test_total_is_sum_of_parts_and_one_side_populated() -> None:
    for order_type in ("MARKET", "LIMIT", "STOP"):
        for duration in (10, 480, 1_500):
            fees = calculate_total_fees(0.37, 48_123.45, order_type, duration)
            parts = fees.maker_fee + fees.taker_fee + fees.funding_fee
            assert abs(fees.total_fees - parts) < 1e-6
            assert fees.maker_fee == 0 or fees.taker_fee == 0


def test_fee_values_rounded_to_six_places() -> None:
    fee = calculate_taker_fee(0.123457, 3.1)
    assert fee == round(fee, 6)
    assert calculate_maker_fee(1, 1) == round(MAKER_FEE_RATE, 6)


def test_custom_funding_rate() -> None:
    assert calculate_funding_fee(10, 100, 0.001, 3) == pytest.approx(3.0)
    fees = calculate_total_fees(10, 100, "LIMIT", 960, funding_rate=-0.0002)
    assert fees.funding_fee == pytest.approx(-0.4)


@pytest.mark.parametrize(("size", "price"), [(0, 100), (-1, 100), (1, 0), (1, -5)])
def test_non_positive_inputs_rejected(size: float, price: float) -> None:
    with pytest.raises(ValueError):
        calculate_notional(size, price)
    with pytest.raises(ValueError):
        calculate_total_fees(size, price, "MARKET")
