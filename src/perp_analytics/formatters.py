"""Display formatting for currency, percentages and durations."""

from __future__ import annotations


def format_currency(value: float, decimals: int = 2) -> str:
    """``1234.5 -> "$1,234.50"``, ``-500 -> "-$500.00"``."""
    formatted = f"{abs(value):,.{decimals}f}"
    return f"-${formatted}" if value < 0 else f"${formatted}"


def format_percent(value: float, decimals: int = 2) -> str:
    """``12.345 -> "+12.35%"``, ``-5.1 -> "-5.10%"``."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_duration(minutes: float) -> str:
    """``45 -> "45m"``, ``135 -> "2h 15m"``, ``1500 -> "1d 1h"``."""
    if minutes < 60:
        return f"{round(minutes)}m"

    days = int(minutes // 1440)
    hours = int((minutes % 1440) // 60)
    mins = round(minutes % 60)

    if days > 0:
        return f"{days}d {hours}h"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_number(value: float, decimals: int | None = None) -> str:
    digits = decimals if decimals is not None else (4 if abs(value) < 1 else 2)
    return f"{value:,.{digits}f}"
