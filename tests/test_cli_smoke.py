import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from click.testing import CliRunner

from perp_analytics.config import get_settings, reload_settings
from perp_analytics.demo import generate_trades
from perp_analytics.main import cli
from perp_analytics.store import TradeStore


def test_cli_report_json(tmp_path: Path, monkeypatch: object) -> None:
    monkeypatch.setenv("PERP_ANALYTICS_LOG_LEVEL", "WARNING")
    reload_settings()
    path = tmp_path / "trades.jsonl"
    TradeStore(path).save(generate_trades(10, seed=1, now=datetime.now(timezone.utc)))
    runner = CliRunner()
    result = runner.invoke(cli, ["report", "--trades", str(path), "--timeframe", "ALL", "--json"])
    monkeypatch.delenv("PERP_ANALYTICS_LOG_LEVEL")
    reload_settings()
    assert result.exit_code == 0
    assert get_settings().log_level == "INFO"
    payload = json.loads(result.stdout)
    assert payload["stats"]["total_trades"] > 0


def test_cli_demo_then_export(tmp_path: Path) -> None:
    store = tmp_path / "demo.jsonl"
    out = tmp_path / "export.csv"
    runner = CliRunner()
    result = runner.invoke(cli, ["demo", "--out", str(store), "--days", "5", "--seed", "3"])
    assert result.exit_code == 0
    result = runner.invoke(cli, ["export", "--trades", str(store), "--out", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    result = runner.invoke(cli, ["report", "--trades", str(store)])
    assert result.exit_code == 0
    assert "Total PnL" in result.output


def test_cli_report_bad_file_exits_nonzero(tmp_path: Path) -> None:
    path = tmp_path / "broken.jsonl"
    path.write_text('{"id": "x"}\n', encoding="utf-8")
    result = CliRunner().invoke(cli, ["report", "--trades", str(path)])
    assert result.exit_code == 1


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "perp-analytics version" in result.output


def test_cli_status_shows_fee_schedule(monkeypatch: object) -> None:
    monkeypatch.setenv("PERP_ANALYTICS_TAKER_FEE_RATE", "0.001")
    reload_settings()
    result = CliRunner().invoke(cli, ["status"])
    monkeypatch.delenv("PERP_ANALYTICS_TAKER_FEE_RATE")
    reload_settings()
    assert result.exit_code == 0
    assert get_settings().taker_fee_rate == 0.0005
    assert "Taker fee rate: 0.001" in result.output
    assert "Maker fee rate: -0.000125" in result.output


def test_cli_demo_uses_configured_fee_rates(tmp_path: Path, monkeypatch: object) -> None:
    monkeypatch.setenv("PERP_ANALYTICS_TAKER_FEE_RATE", "0.001")
    reload_settings()
    store = tmp_path / "demo.jsonl"
    result = CliRunner().invoke(cli, ["demo", "--out", str(store), "--days", "10", "--seed", "4"])
    monkeypatch.delenv("PERP_ANALYTICS_TAKER_FEE_RATE")
    reload_settings()
    assert result.exit_code == 0
    trades = TradeStore(store).load()
    takers = [t for t in trades if t.order_type != "LIMIT"]
    makers = [t for t in trades if t.order_type == "LIMIT"]
    assert takers and makers
    for trade in takers:
        assert trade.taker_fee == pytest.approx(trade.notional * 0.001, abs=1e-6)
    for trade in makers:
        assert trade.maker_fee == pytest.approx(-trade.notional * 0.000125, abs=1e-6)
