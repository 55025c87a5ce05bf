"""Configuration loading from environment variables and the .env file."""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    """Log output format."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Analytics settings.

    Loaded from environment variables prefixed ``PERP_ANALYTICS_`` and from
    a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERP_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Fee schedule ====================
    taker_fee_rate: float = Field(
        default=0.0005,
        ge=0.0,
        le=0.01,
        description="Taker fee as a fraction of notional",
    )
    maker_rebate_ratio: float = Field(
        default=0.125,
        ge=0.0,
        le=1.0,
        description="Share of the taker fee paid back to makers",
    )
    default_funding_rate: float = Field(
        default=0.0001,
        ge=-0.01,
        le=0.01,
        description="Funding rate per 8-hour interval",
    )

    # ==================== Analytics ====================
    reference_timezone: str = Field(
        default="UTC",
        description="IANA timezone used for date, hour and weekday buckets",
    )
    default_timeframe: Literal["7D", "30D", "90D", "ALL"] = Field(
        default="30D",
        description="Timeframe used when the CLI is not given one",
    )
    account_balance: float | None = Field(
        default=None,
        description="Current account equity; the period baseline is derived from it",
    )

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format",
    )

    # ==================== Storage ====================
    trade_store_path: Path = Field(
        default=Path("data/trades.jsonl"),
        description="JSONL file holding persisted trades",
    )

    @field_validator("trade_store_path", mode="before")
    @classmethod
    def parse_trade_store_path(cls, v: str | Path) -> Path:
        """Convert strings to Path objects."""
        return Path(v) if isinstance(v, str) else v

    @property
    def maker_fee_rate(self) -> float:
        """Maker fee rate; negative means a rebate."""
        return -(self.taker_fee_rate * self.maker_rebate_ratio)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from the environment."""
    global _settings
    _settings = Settings()
    return _settings
