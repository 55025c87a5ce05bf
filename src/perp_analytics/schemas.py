"""Trade input schema and strict parsing helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from perp_analytics.types import Trade


class TradeParseError(ValueError):
    """Raised when a trade record fails validation."""


class TradePayload(BaseModel):
    """Serialized trade record as stored or exported.

    Accepts both camelCase and snake_case keys. Derived keys such as
    ``notional``, ``duration`` and ``totalFees`` are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    side: Literal["LONG", "SHORT"]
    market_type: Literal["PERP", "SPOT"] = Field(
        default="PERP",
        validation_alias=AliasChoices("market_type", "marketType"),
    )
    order_type: Literal["MARKET", "LIMIT", "STOP"] = Field(
        validation_alias=AliasChoices("order_type", "orderType"),
    )
    entry_price: float = Field(ge=0.0, validation_alias=AliasChoices("entry_price", "entryPrice"))
    exit_price: float = Field(ge=0.0, validation_alias=AliasChoices("exit_price", "exitPrice"))
    size: float = Field(ge=0.0)
    pnl: float = 0.0
    pnl_percent: float = Field(
        default=0.0,
        validation_alias=AliasChoices("pnl_percent", "pnlPercent"),
    )
    entry_time: datetime = Field(validation_alias=AliasChoices("entry_time", "entryTime"))
    exit_time: datetime = Field(validation_alias=AliasChoices("exit_time", "exitTime"))
    maker_fee: float = Field(default=0.0, validation_alias=AliasChoices("maker_fee", "makerFee"))
    taker_fee: float = Field(default=0.0, validation_alias=AliasChoices("taker_fee", "takerFee"))
    funding_fee: float = Field(
        default=0.0,
        validation_alias=AliasChoices("funding_fee", "fundingFee"),
    )
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("side", "order_type", "market_type", mode="before")
    @classmethod
    def upper_enum(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("entry_time", "exit_time")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(";") if tag.strip()]
        return v

    def to_trade(self) -> Trade:
        return Trade(
            id=self.id,
            symbol=self.symbol,
            side=self.side,
            market_type=self.market_type,
            order_type=self.order_type,
            entry_price=self.entry_price,
            exit_price=self.exit_price,
            size=self.size,
            pnl=self.pnl,
            pnl_percent=self.pnl_percent,
            entry_time=self.entry_time,
            exit_time=self.exit_time,
            maker_fee=self.maker_fee,
            taker_fee=self.taker_fee,
            funding_fee=self.funding_fee,
            notes=self.notes or None,
            tags=frozenset(self.tags),
        )

    @classmethod
    def from_trade(cls, trade: Trade) -> "TradePayload":
        return cls(
            id=trade.id,
            symbol=trade.symbol,
            side=trade.side,
            market_type=trade.market_type,
            order_type=trade.order_type,
            entry_price=trade.entry_price,
            exit_price=trade.exit_price,
            size=trade.size,
            pnl=trade.pnl,
            pnl_percent=trade.pnl_percent,
            entry_time=trade.entry_time,
            exit_time=trade.exit_time,
            maker_fee=trade.maker_fee,
            taker_fee=trade.taker_fee,
            funding_fee=trade.funding_fee,
            notes=trade.notes,
            tags=sorted(trade.tags),
        )


def parse_trade(payload: dict[str, Any]) -> Trade:
    """Validate one raw record and build a Trade."""
    try:
        return TradePayload.model_validate(payload).to_trade()
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise TradeParseError(f"invalid_trade: {location}: {error['msg']}") from exc
    except ValueError as exc:
        raise TradeParseError(f"invalid_trade: {exc}") from exc


def parse_trades(rows: Iterable[dict[str, Any]]) -> list[Trade]:
    """Validate many raw records; the error names the failing row index."""
    trades: list[Trade] = []
    for index, row in enumerate(rows):
        try:
            trades.append(parse_trade(row))
        except TradeParseError as exc:
            raise TradeParseError(f"row {index}: {exc}") from exc
    return trades


def trade_as_row(trade: Trade) -> dict[str, Any]:
    """JSON-safe dict for one trade, including derived fields."""
    row = TradePayload.from_trade(trade).model_dump(mode="json")
    row["notional"] = trade.notional
    row["duration_minutes"] = trade.duration_minutes
    row["total_fees"] = trade.total_fees
    return row
