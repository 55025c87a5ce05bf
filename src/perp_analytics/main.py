"""CLI entry point for perp-analytics."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click

from perp_analytics import __version__
from perp_analytics.analytics import build_dashboard, dashboard_as_dict
from perp_analytics.config import get_settings
from perp_analytics.demo import generate_trades
from perp_analytics.formatters import format_currency, format_duration, format_percent
from perp_analytics.io import export_trades_csv, load_trades_csv
from perp_analytics.store import TradeStore
from perp_analytics.types import FilterState, Trade
from perp_analytics.utils.logging import get_logger, setup_logging


def _load_trades(path: Path) -> list[Trade]:
    if path.suffix.lower() == ".csv":
        return load_trades_csv(path)
    return TradeStore(path).load()


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show the version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """perp-analytics - performance analytics for perpetual-futures trades.

    Fees, equity curve, drawdown, Sharpe ratio and win/loss statistics over a
    trade history file.
    """
    if version:
        click.echo(f"perp-analytics version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option(
    "--trades",
    "trades_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Trade file (.jsonl or .csv); defaults to the configured store",
)
@click.option("--symbol", default="all", help="Symbol filter, e.g. BTC-PERP")
@click.option(
    "--order-type",
    type=click.Choice(["all", "MARKET", "LIMIT", "STOP"], case_sensitive=False),
    default="all",
)
@click.option(
    "--side",
    type=click.Choice(["all", "LONG", "SHORT"], case_sensitive=False),
    default="all",
)
@click.option(
    "--timeframe",
    type=click.Choice(["7D", "30D", "90D", "ALL"], case_sensitive=False),
    default=None,
    help="Lookback window; defaults to the configured timeframe",
)
@click.option("--balance", type=float, default=None, help="Current account equity")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print full JSON output")
def report(
    trades_path: Path | None,
    symbol: str,
    order_type: str,
    side: str,
    timeframe: str | None,
    balance: float | None,
    as_json: bool,
) -> None:
    """Compute dashboard metrics for a trade file."""
    setup_logging()
    logger = get_logger("perp_analytics.main")
    settings = get_settings()

    path = trades_path or settings.trade_store_path
    filters = FilterState(
        symbol=symbol,
        timeframe=(timeframe or settings.default_timeframe).upper(),  # type: ignore[arg-type]
        order_type=order_type if order_type == "all" else order_type.upper(),
        side=side if side == "all" else side.upper(),
    )

    try:
        trades = _load_trades(path)
        result = build_dashboard(
            trades,
            filters,
            account_balance=balance if balance is not None else settings.account_balance,
            tz=ZoneInfo(settings.reference_timezone),
        )
    except (OSError, ValueError, ZoneInfoNotFoundError) as e:
        logger.error("report_failed", path=str(path), error=str(e))
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(dashboard_as_dict(result), indent=2))
        return

    stats = result.stats
    click.echo("=" * 50)
    click.echo(f"Trades: {stats.total_trades}  ({path})")
    click.echo("=" * 50)
    click.echo(f"   Total PnL:      {format_currency(stats.total_pnl)}")
    click.echo(f"   Return:         {format_percent(stats.total_pnl_percent)}")
    click.echo(f"   Win rate:       {stats.win_rate}%")
    click.echo(f"   Profit factor:  {stats.profit_factor}")
    click.echo(f"   Sharpe ratio:   {stats.sharpe_ratio}")
    click.echo(f"   Max drawdown:   {stats.max_drawdown}%")
    avg_win = format_currency(stats.avg_win)
    avg_loss = format_currency(stats.avg_loss)
    click.echo(f"   Avg win/loss:   {avg_win} / {avg_loss}")
    click.echo(f"   Avg duration:   {format_duration(stats.avg_trade_duration)}")
    click.echo(f"   Volume:         {format_currency(stats.total_volume)}")
    click.echo(f"   Fees:           {format_currency(stats.total_fees)}")
    click.echo()
    click.echo("[Symbols]")
    for row in result.symbol_stats:
        click.echo(
            f"   {row.symbol:<12} {row.trades:>4} trades  "
            f"{format_currency(row.pnl):>12}  {row.win_rate}% win"
        )


@cli.command()
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=None)
@click.option("--days", type=int, default=90, help="Days of history to generate")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible output")
def demo(out_path: Path | None, days: int, seed: int | None) -> None:
    """Write a generated demo trade history."""
    setup_logging()
    settings = get_settings()
    path = out_path or settings.trade_store_path
    trades = generate_trades(
        days,
        seed=seed,
        now=datetime.now(timezone.utc),
        taker_rate=settings.taker_fee_rate,
        maker_rate=settings.maker_fee_rate,
        funding_rate=settings.default_funding_rate,
    )
    TradeStore(path).save(trades)
    click.echo(f"Wrote {len(trades)} demo trades to {path}")


@cli.command()
@click.option("--trades", "trades_path", type=click.Path(path_type=Path), default=None)
@click.option("--out", "out_path", type=click.Path(path_type=Path), required=True)
def export(trades_path: Path | None, out_path: Path) -> None:
    """Export trades to a CSV file."""
    setup_logging()
    logger = get_logger("perp_analytics.main")
    settings = get_settings()
    path = trades_path or settings.trade_store_path
    try:
        trades = _load_trades(path)
    except (OSError, ValueError) as e:
        logger.error("export_failed", path=str(path), error=str(e))
        sys.exit(1)
    export_trades_csv(trades, out_path)
    click.echo(f"Exported {len(trades)} trades to {out_path}")


@cli.command()
def status() -> None:
    """Show the active configuration."""
    settings = get_settings()

    click.echo("=" * 50)
    click.echo("perp-analytics - Status")
    click.echo("=" * 50)
    click.echo()

    click.echo("[Fee Schedule]")
    click.echo(f"   Taker fee rate: {settings.taker_fee_rate}")
    click.echo(f"   Maker fee rate: {settings.maker_fee_rate}")
    click.echo(f"   Funding rate (8h): {settings.default_funding_rate}")
    click.echo()

    click.echo("[Analytics]")
    click.echo(f"   Reference timezone: {settings.reference_timezone}")
    click.echo(f"   Default timeframe: {settings.default_timeframe}")
    balance = "not set" if settings.account_balance is None else settings.account_balance
    click.echo(f"   Account balance: {balance}")
    click.echo()

    click.echo("[Storage & Logging]")
    click.echo(f"   Trade store: {settings.trade_store_path}")
    click.echo(f"   Log level: {settings.log_level}")
    click.echo(f"   Log format: {settings.log_format.value}")
    click.echo()
    click.echo("=" * 50)


if __name__ == "__main__":
    cli()
