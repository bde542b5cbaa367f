"""
Exporting the trade history: CSV ledger, JSON and Markdown summaries, and a
plain-text summary for sharing.
"""
import json
from datetime import date
from pathlib import Path
from typing import List, Optional

import pandas as pd
from rich.console import Console

from intraday.config import Config
from intraday.metrics import calculate_cumulative_pnl, summarize_history
from intraday.types import TradeLogEntry

__all__ = [
    "build_csv_frame",
    "format_currency",
    "format_share_text",
    "generate_all_reports",
]

CSV_COLUMNS = [
    "ID", "Stock", "Type", "Entry", "Exit", "CapitalUsed", "Quantity",
    "GrossPnl", "NetPnl", "TotalCharges", "Brokerage", "STT", "GST",
    "StampDuty", "ExchangeFees", "SL(%)", "TP(%)",
]


def format_currency(value: float, symbol: str = "₹") -> str:
    return f"{symbol}{value:.2f}"


def _format_number(value: Optional[float]) -> str:
    """Writes whole numbers without a trailing ".0", so 2900.0 becomes 2900."""
    if value is None:
        return "default"
    return str(int(value)) if float(value).is_integer() else str(value)


def build_csv_frame(entries: List[TradeLogEntry]) -> pd.DataFrame:
    """
    One row per logged trade, in log order, with money columns at 2 decimals.

    Stop-loss and target percentages that were left to their defaults are
    written as "default".
    """
    rows = [
        [
            entry.id,
            entry.stock,
            entry.direction.value,
            _format_number(entry.entry_price),
            _format_number(entry.exit_price),
            f"{entry.position_value:.2f}",
            entry.quantity,
            f"{entry.gross_pnl:.2f}",
            f"{entry.net_pnl:.2f}",
            f"{entry.total_charges:.2f}",
            f"{entry.charges.brokerage:.2f}",
            f"{entry.charges.securities_transaction_tax:.2f}",
            f"{entry.charges.goods_and_services_tax:.2f}",
            f"{entry.charges.stamp_duty:.2f}",
            f"{entry.charges.exchange_fee:.2f}",
            _format_number(entry.stop_loss_pct),
            _format_number(entry.target_pct),
        ]
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def format_share_text(entries: List[TradeLogEntry], today: date, currency: str = "₹") -> str:
    """Builds the chat-friendly daily summary of the history."""
    if not entries:
        return ""

    header = (
        f"*📈 Intraday Trading Summary - {today.strftime('%d %b %Y')} 📉*\n"
        "---------------------------------"
    )

    blocks = []
    for index, entry in enumerate(entries, start=1):
        emoji = "📈" if entry.net_pnl >= 0 else "📉"
        blocks.append(
            f"*{index}. {entry.stock.upper()} ({entry.direction.value})*\n"
            f"Qty: {entry.quantity} | Entry: {format_currency(entry.entry_price, currency)}"
            f" | Exit: {format_currency(entry.exit_price, currency)}\n"
            f"Net P/L: *{format_currency(entry.net_pnl, currency)}* {emoji}"
        )

    summary = summarize_history(entries)
    footer = (
        "---------------------------------\n"
        "*Overall Summary:*\n"
        f"Total Trades: {summary['total_trades']}\n"
        f"Total Charges: {format_currency(summary['total_charges'], currency)}\n"
        f"*Final Net P/L: {format_currency(summary['total_net_pnl'], currency)}*"
    )
    return f"{header}\n\n" + "\n\n".join(blocks) + f"\n\n{footer}"


# impure
def _generate_trade_ledger_csv(entries: List[TradeLogEntry], output_dir: Path) -> None:
    """Generates a CSV file with all trade details."""
    build_csv_frame(entries).to_csv(output_dir / "trade_log.csv", index=False)


# impure
def _generate_summary_json(entries: List[TradeLogEntry], config: Config, output_dir: Path) -> None:
    """Generates a JSON file with summary metrics, the charge schedule used and every entry."""
    summary = {
        "metrics": summarize_history(entries),
        "charges": config.charges.to_mapping(),
        "trades": [entry.model_dump(mode="json") for entry in entries],
    }
    with (output_dir / "summary.json").open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)


# impure
def _generate_summary_markdown(entries: List[TradeLogEntry], config: Config, output_dir: Path) -> None:
    """Generates a Markdown trade log with a closing summary."""
    currency = config.reporting.currency_symbol
    md = "# Intraday Trade Log\n\n"
    md += "| Stock | Type | Entry | Exit | Net P/L | Cumulative | Charges |\n"
    md += "|---|---|---|---|---|---|---|\n"
    cumulative = calculate_cumulative_pnl(entries)["cumulative"]
    for entry, running in zip(entries, cumulative):
        md += (
            f"| {entry.stock} | {entry.direction.value} "
            f"| {format_currency(entry.entry_price, currency)} "
            f"| {format_currency(entry.exit_price, currency)} "
            f"| {format_currency(entry.net_pnl, currency)} "
            f"| {format_currency(running, currency)} "
            f"| {format_currency(entry.total_charges, currency)} |\n"
        )

    summary = summarize_history(entries)
    md += "\n## Summary\n\n"
    md += f"- **Total Trades**: {summary['total_trades']}\n"
    md += f"- **Total Net P/L**: {format_currency(summary['total_net_pnl'], currency)}\n"
    md += f"- **Total Charges**: {format_currency(summary['total_charges'], currency)}\n"
    md += f"- **Win Rate**: {summary['win_rate'] * 100:.2f}%\n"

    (output_dir / "trade_log.md").write_text(md, encoding="utf-8")


# impure
def generate_all_reports(
    config: Config,
    entries: List[TradeLogEntry],
    run_dir: Path,
    console: Console,
) -> None:
    """
    Orchestrates the generation of all output reports.
    #impure: Writes to the filesystem.
    """
    if not entries:
        console.print("[yellow]Trade history is empty. Nothing to export.[/yellow]")
        return

    run_dir.mkdir(parents=True, exist_ok=True)
    formats = config.reporting.output_formats

    if "csv" in formats:
        console.print("Generating trade log CSV...")
        _generate_trade_ledger_csv(entries, run_dir)

    if "json" in formats:
        console.print("Generating summary JSON...")
        _generate_summary_json(entries, config, run_dir)

    if "markdown" in formats:
        console.print("Generating summary Markdown...")
        _generate_summary_markdown(entries, config, run_dir)

    console.print("All reports generated.")
