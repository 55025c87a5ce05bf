"""CSV loading and export for trade records."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd  # type: ignore[import-untyped]

from perp_analytics.schemas import parse_trades
from perp_analytics.types import Trade
from perp_analytics.utils.logging import get_logger

_REQUIRED_COLUMNS = [
    "id",
    "symbol",
    "side",
    "order_type",
    "entry_price",
    "exit_price",
    "size",
    "pnl",
    "entry_time",
    "exit_time",
]
_NUMERIC_COLUMNS = [
    "entry_price",
    "exit_price",
    "size",
    "pnl",
    "pnl_percent",
    "maker_fee",
    "taker_fee",
    "funding_fee",
]
_OPTIONAL_ZERO_COLUMNS = ["pnl_percent", "maker_fee", "taker_fee", "funding_fee"]
_EXPORT_COLUMNS = [
    "date",
    "symbol",
    "side",
    "type",
    "size",
    "entry_price",
    "exit_price",
    "pnl",
    "pnl_percent",
    "fees",
    "notes",
]


def load_trades_csv(path: Path) -> list[Trade]:
    """Load trades from CSV, dropping rows with unusable values."""
    df = pd.read_csv(path)
    return trades_from_frame(df)


def trades_from_frame(df: pd.DataFrame) -> list[Trade]:
    """Validate/normalize a dataframe of trade rows into Trades."""
    df = df.rename(columns=_snake_case)
    missing = [col for col in _REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"missing_trade_columns: {','.join(missing)}")

    normalized = df.copy()
    normalized["entry_time"] = pd.to_datetime(normalized["entry_time"], utc=True, errors="coerce")
    normalized["exit_time"] = pd.to_datetime(normalized["exit_time"], utc=True, errors="coerce")
    for col in _NUMERIC_COLUMNS:
        if col in normalized.columns:
            normalized[col] = pd.to_numeric(normalized[col], errors="coerce")

    present_numeric = [col for col in _NUMERIC_COLUMNS if col in normalized.columns]
    for col in _OPTIONAL_ZERO_COLUMNS:
        if col in normalized.columns:
            normalized[col] = normalized[col].fillna(0.0)

    before = len(normalized)
    normalized = normalized.dropna(subset=present_numeric + ["entry_time", "exit_time"])
    dropped = before - len(normalized)
    if dropped:
        get_logger("perp_analytics.io").warning(
            "csv_rows_dropped",
            dropped=dropped,
            kept=len(normalized),
        )

    normalized = normalized.astype(object).where(normalized.notna(), None)
    rows = []
    for record in normalized.to_dict(orient="records"):
        record["entry_time"] = record["entry_time"].to_pydatetime()
        record["exit_time"] = record["exit_time"].to_pydatetime()
        record["id"] = str(record["id"])
        rows.append(record)
    return parse_trades(rows)


def trades_to_frame(trades: Sequence[Trade]) -> pd.DataFrame:
    """Export view of trades, one row per trade."""
    rows = [
        {
            "date": trade.entry_time.isoformat(),
            "symbol": trade.symbol,
            "side": trade.side,
            "type": trade.market_type,
            "size": trade.size,
            "entry_price": trade.entry_price,
            "exit_price": trade.exit_price,
            "pnl": round(trade.pnl, 2),
            "pnl_percent": f"{trade.pnl_percent:.2f}%",
            "fees": round(trade.total_fees, 2),
            "notes": trade.notes or "",
        }
        for trade in trades
    ]
    return pd.DataFrame(rows, columns=_EXPORT_COLUMNS)


def export_trades_csv(trades: Sequence[Trade], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    trades_to_frame(trades).to_csv(path, index=False)
    return path


def _snake_case(name: str) -> str:
    out = []
    for char in str(name).strip():
        if char.isupper():
            out.append("_" + char.lower())
        else:
            out.append(char)
    return "".join(out).lstrip("_")
