"""Shared value types for trade analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Side = Literal["LONG", "SHORT"]
OrderType = Literal["MARKET", "LIMIT", "STOP"]
MarketType = Literal["PERP", "SPOT"]
Timeframe = Literal["7D", "30D", "90D", "ALL"]


@dataclass(frozen=True, slots=True)
class Trade:
    """One completed (or open) position.

    Notional, duration and total fees are derived from the stored fields so
    they can never drift from them.
    """

    id: str
    symbol: str
    side: Side
    market_type: MarketType
    order_type: OrderType
    entry_price: float
    exit_price: float
    size: float
    pnl: float
    pnl_percent: float
    entry_time: datetime
    exit_time: datetime
    maker_fee: float = 0.0
    taker_fee: float = 0.0
    funding_fee: float = 0.0
    notes: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.exit_time < self.entry_time:
            raise ValueError(f"exit_before_entry: {self.id}")
        if self.maker_fee != 0 and self.taker_fee != 0:
            raise ValueError(f"maker_and_taker_fee_both_set: {self.id}")

    @property
    def notional(self) -> float:
        return self.size * self.entry_price

    @property
    def duration_minutes(self) -> float:
        return (self.exit_time - self.entry_time).total_seconds() / 60.0

    @property
    def total_fees(self) -> float:
        return self.maker_fee + self.taker_fee + self.funding_fee


@dataclass(frozen=True, slots=True)
class FeeResult:
    """Fee breakdown for a single trade."""

    maker_fee: float
    taker_fee: float
    funding_fee: float
    total_fees: float


@dataclass(frozen=True, slots=True)
class DailyPnL:
    """Per-calendar-date pnl with running equity drawdown."""

    date: str
    pnl: float
    cumulative_pnl: float
    drawdown: float
    trades: int


@dataclass(frozen=True, slots=True)
class PortfolioStats:
    """Aggregate snapshot over one trade set."""

    total_pnl: float = 0.0
    total_pnl_percent: float = 0.0
    win_rate: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    avg_trade_duration: float = 0.0
    total_volume: float = 0.0
    total_fees: float = 0.0
    long_ratio: float = 0.0
    short_ratio: float = 0.0
    profit_factor: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0


@dataclass(frozen=True, slots=True)
class FeeBreakdown:
    """Fees summed by type."""

    maker: float
    taker: float
    funding: float
    total: float


@dataclass(frozen=True, slots=True)
class VolumeData:
    """Notional traded on one date."""

    date: str
    volume: float
    trades: int


@dataclass(frozen=True, slots=True)
class HeatmapData:
    """One non-empty cell of the weekday x hour grid."""

    hour: int
    day_of_week: int
    pnl: float
    trades: int


@dataclass(frozen=True, slots=True)
class SymbolStats:
    """Per-symbol aggregate."""

    symbol: str
    trades: int
    pnl: float
    win_rate: float
    volume: float


@dataclass(frozen=True, slots=True)
class FilterState:
    """Current trade selection. ``"all"`` disables a string filter."""

    symbol: str = "all"
    timeframe: Timeframe = "30D"
    order_type: str = "all"
    side: str = "all"
