"""
Tests for CLI interface.
"""
import copy
from pathlib import Path

import yaml

from typer.testing import CliRunner

from cli import app

# Default CliRunner mixes stderr and stdout into the .output attribute,
# which is what we want for testing console output.
runner = CliRunner()


# Using a full, valid config dictionary to prevent KeyErrors during tests.
FULL_CONFIG_DICT = {
    "charges": {
        "buy_brokerage": {"amount": 20.0, "is_percentage": False},
        "sell_brokerage": {"amount": 20.0, "is_percentage": False},
    },
    "simulation": {"curve_steps": 4},
    "history": {"path": ""},
    "reporting": {"output_dir": "", "output_formats": ["csv", "json", "markdown"], "currency_symbol": "Rs"},
}

LONG_TRADE = ["--stock", "INFY", "--direction", "long", "--entry-price", "100", "--quantity", "10"]


def create_temp_config(tmp_path: Path) -> Path:
    """Creates a temporary, valid YAML config file for testing."""
    config_path = tmp_path / "test_config.yaml"
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["history"]["path"] = str(tmp_path / "history" / "trade_log.json")
    config_dict["reporting"]["output_dir"] = str(tmp_path / "reports")
    config_path.write_text(yaml.dump(config_dict))
    return config_path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "simulate" in result.output
    assert "clear-history" in result.output


def test_cli_simulate_with_missing_config_file() -> None:
    """Test that `simulate` exits if the config file does not exist."""
    result = runner.invoke(app, ["simulate", "--config", "nonexistent.yaml", *LONG_TRADE])
    assert result.exit_code == 2
    assert "does not exist" in result.output


def test_cli_simulate_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(yaml.dump({"charges": {"stamp_duty": {"amount": -1}}}))
    result = runner.invoke(app, ["simulate", "--config", str(config_path), *LONG_TRADE])
    assert result.exit_code == 1
    assert "Configuration Error" in result.output


def test_cli_simulate_prints_levels_and_pnl(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["simulate", "--config", str(config_path), *LONG_TRADE, "--exit-price", "110"])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Rs97.00" in result.output
    assert "Rs110.00" in result.output
    assert "1:3.33" in result.output
    # gross 100 minus 40 brokerage
    assert "Net P/L: Rs60.00 (6.00%)" in result.output
    assert not (tmp_path / "history" / "trade_log.json").exists()


def test_cli_simulate_rejects_invalid_trade(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(
        app,
        ["simulate", "--config", str(config_path), "--stock", "INFY", "--entry-price", "0", "--quantity", "10"],
    )
    assert result.exit_code == 1
    assert "Invalid trade input" in result.output
    assert "entry_price" in result.output


def test_cli_simulate_log_then_history_and_clear(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    history_path = tmp_path / "history" / "trade_log.json"

    result = runner.invoke(
        app, ["simulate", "--config", str(config_path), *LONG_TRADE, "--exit-price", "105", "--log"]
    )
    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Trade logged" in result.output
    assert history_path.exists()

    result = runner.invoke(app, ["history", "--config", str(config_path)])
    assert result.exit_code == 0
    assert "INFY" in result.output
    assert "Total trades: 1" in result.output

    result = runner.invoke(app, ["clear-history", "--config", str(config_path)])
    assert result.exit_code == 0
    assert "Trade history cleared" in result.output
    assert not history_path.exists()

    result = runner.invoke(app, ["history", "--config", str(config_path)])
    assert "No trades logged yet" in result.output


def test_cli_history_shows_cumulative_pnl(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    # net 10 (gross 50 minus 40 brokerage), then net 60
    runner.invoke(app, ["simulate", "--config", str(config_path), *LONG_TRADE, "--exit-price", "105", "--log"])
    tcs_trade = ["--stock", "TCS", *LONG_TRADE[2:]]
    runner.invoke(app, ["simulate", "--config", str(config_path), *tcs_trade, "--exit-price", "110", "--log"])

    result = runner.invoke(app, ["history", "--config", str(config_path)])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Cumulative" in result.output
    lines = result.output.splitlines()
    tcs_row = next(line for line in lines if "TCS" in line)
    infy_row = next(line for line in lines if "INFY" in line)
    assert "Rs60.00" in tcs_row and "Rs70.00" in tcs_row
    assert infy_row.count("Rs10.00") == 2
    # newest first
    assert lines.index(tcs_row) < lines.index(infy_row)
    assert "Total net P/L: Rs70.00" in result.output


def test_cli_history_corrupt_store(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    history_path = tmp_path / "history" / "trade_log.json"
    history_path.parent.mkdir(parents=True)
    history_path.write_text("not json")

    result = runner.invoke(app, ["history", "--config", str(config_path)])
    assert result.exit_code == 1
    assert "History Error" in result.output


def test_cli_curve(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["curve", "--config", str(config_path), *LONG_TRADE])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    # 4 steps of 3.25 between 97 and 110
    for price in ("Rs97.00", "Rs100.25", "Rs103.50", "Rs106.75", "Rs110.00"):
        assert price in result.output


def test_cli_curve_short_has_no_range(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(
        app,
        ["curve", "--config", str(config_path), "--stock", "SBIN", "--direction", "SHORT",
         "--entry-price", "600", "--quantity", "5"],
    )
    assert result.exit_code == 0
    assert "No curve to sample" in result.output


def test_cli_export_runs(mocker, tmp_path: Path) -> None:
    """
    Tests that the `export` command hands the stored history to the report writer.
    """
    m_reports = mocker.patch("cli.generate_all_reports")
    config_path = create_temp_config(tmp_path)
    runner.invoke(app, ["simulate", "--config", str(config_path), *LONG_TRADE, "--log"])

    result = runner.invoke(app, ["export", "--config", str(config_path), "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    m_reports.assert_called_once()
    _, entries, run_dir, _ = m_reports.call_args.args
    assert [e.stock for e in entries] == ["INFY"]
    assert run_dir == tmp_path / "out"


def test_cli_share_prints_summary(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    runner.invoke(app, ["simulate", "--config", str(config_path), *LONG_TRADE, "--exit-price", "110", "--log"])

    result = runner.invoke(app, ["share", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "Intraday Trading Summary" in result.output
    assert "*Final Net P/L: Rs60.00*" in result.output


def test_cli_share_empty_history(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["share", "--config", str(config_path)])
    assert result.exit_code == 0
    assert "Nothing to share" in result.output
