"""
CLI entry point for the intraday trade simulator.
"""
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from intraday.adapters.json_store import JsonHistoryStore
from intraday.config import Config, load_config
from intraday.core.engine import TradeEconomicsEngine
from intraday.core.history import HistoryStoreError, TradeHistoryStore
from intraday.metrics import calculate_cumulative_pnl, summarize_history
from intraday.reporting import format_currency, format_share_text, generate_all_reports
from intraday.types import CurvePoint, Direction, PnlBreakdown, TradeInput

# Console is created once and passed down.
# Log to stderr to separate from potential data output to stdout.
app = typer.Typer(pretty_exceptions_show_locals=False, help="Intraday equity trade simulator.")
console = Console(stderr=True)

CONFIG_OPTION = typer.Option(..., "--config", "-c", help="Path to the YAML configuration file.", exists=True)
STOCK_OPTION = typer.Option(..., "--stock", "-s", help="Stock symbol or name.")
DIRECTION_OPTION = typer.Option(Direction.LONG, "--direction", "-d", case_sensitive=False, help="LONG or SHORT.")
ENTRY_OPTION = typer.Option(..., "--entry-price", "-e", help="Entry price per unit.")
QUANTITY_OPTION = typer.Option(..., "--quantity", "-q", help="Number of units.")
STOP_LOSS_OPTION = typer.Option(None, "--stop-loss", help="Stop-loss distance in percent (default 3).")
TARGET_OPTION = typer.Option(None, "--target", help="Target distance in percent (default 10).")


def _load_config_or_exit(config_path: Path) -> Config:
    """Helper to load config and exit on failure."""
    try:
        return load_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(code=1)


def _open_store_or_exit(config: Config) -> TradeHistoryStore:
    try:
        return JsonHistoryStore(config.history.path)
    except HistoryStoreError as e:
        console.print(f"[bold red]History Error:[/bold red] {e}")
        raise typer.Exit(code=1)


def _build_engine_or_exit(
    config: Config,
    stock: str,
    direction: Direction,
    entry_price: float,
    quantity: int,
    stop_loss: Optional[float],
    target: Optional[float],
) -> TradeEconomicsEngine:
    """Validates the trade input and pairs it with the configured charges."""
    try:
        trade = TradeInput(
            stock=stock,
            direction=direction,
            entry_price=entry_price,
            quantity=quantity,
            stop_loss_pct=stop_loss,
            target_pct=target,
        )
    except ValidationError as e:
        console.print("[bold red]Invalid trade input:[/bold red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f" - {field}: {error['msg']}")
        raise typer.Exit(code=1)
    return TradeEconomicsEngine(trade, config.charges)


def _print_levels(engine: TradeEconomicsEngine, currency: str) -> None:
    levels = engine.levels
    trade = engine.trade
    console.rule(f"[bold]Trade Simulation: {trade.stock} ({trade.direction.value})[/bold]")
    console.print(f"Position value: [cyan]{format_currency(levels.position_value, currency)}[/cyan]")
    console.print(f"Stop-loss: [red]{format_currency(levels.stop_loss_price, currency)}[/red]")
    console.print(f"Target: [green]{format_currency(levels.target_price, currency)}[/green]")
    console.print(f"Risk/Reward: {levels.risk_reward_ratio}")


def _print_pnl(pnl: PnlBreakdown, exit_price: float, currency: str) -> None:
    colour = "green" if pnl.net_pnl >= 0 else "red"
    table = Table(title=f"P/L at {format_currency(exit_price, currency)}")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    table.add_row("Gross P/L", format_currency(pnl.gross_pnl, currency))
    table.add_row("Brokerage", format_currency(pnl.charges.brokerage, currency))
    table.add_row("STT", format_currency(pnl.charges.securities_transaction_tax, currency))
    table.add_row("Exchange fee", format_currency(pnl.charges.exchange_fee, currency))
    table.add_row("GST", format_currency(pnl.charges.goods_and_services_tax, currency))
    table.add_row("Stamp duty", format_currency(pnl.charges.stamp_duty, currency))
    table.add_row("Total charges", format_currency(pnl.total_charges, currency))
    table.add_row(f"[{colour}]Net P/L[/{colour}]", f"[{colour}]{format_currency(pnl.net_pnl, currency)}[/{colour}]")
    console.print(table)
    console.print(f"Net P/L: [{colour}]{format_currency(pnl.net_pnl, currency)} ({pnl.pnl_pct:.2f}%)[/{colour}]")


def _print_curve(points: List[CurvePoint], currency: str) -> None:
    table = Table(title="Net P/L vs. price")
    table.add_column("Price", justify="right")
    table.add_column("Net P/L", justify="right")
    for point in points:
        table.add_row(format_currency(point.price, currency), format_currency(point.net_pnl, currency))
    console.print(table)


@app.command()
def simulate(
    config_path: Path = CONFIG_OPTION,
    stock: str = STOCK_OPTION,
    direction: Direction = DIRECTION_OPTION,
    entry_price: float = ENTRY_OPTION,
    quantity: int = QUANTITY_OPTION,
    stop_loss: Optional[float] = STOP_LOSS_OPTION,
    target: Optional[float] = TARGET_OPTION,
    exit_price: Optional[float] = typer.Option(
        None, "--exit-price", "-x", help="Simulated market price (defaults to the entry price)."
    ),
    log_trade: bool = typer.Option(False, "--log", help="Append the result to the trade history."),
):
    """Simulate a trade and show its P/L at a given market price."""
    config = _load_config_or_exit(config_path)
    engine = _build_engine_or_exit(config, stock, direction, entry_price, quantity, stop_loss, target)
    currency = config.reporting.currency_symbol

    price = engine.trade.entry_price if exit_price is None else exit_price
    _print_levels(engine, currency)
    _print_pnl(engine.project(price), price, currency)

    if log_trade:
        store = _open_store_or_exit(config)
        try:
            store.append(engine.log_entry(price))
        except HistoryStoreError as e:
            console.print(f"[bold red]History Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        console.print(f"[bold green]Trade logged.[/bold green] {engine.trade.stock} trade has been saved.")


@app.command()
def curve(
    config_path: Path = CONFIG_OPTION,
    stock: str = STOCK_OPTION,
    direction: Direction = DIRECTION_OPTION,
    entry_price: float = ENTRY_OPTION,
    quantity: int = QUANTITY_OPTION,
    stop_loss: Optional[float] = STOP_LOSS_OPTION,
    target: Optional[float] = TARGET_OPTION,
    steps: Optional[int] = typer.Option(None, "--steps", min=1, help="Number of equal price steps."),
):
    """Sample net P/L between the stop-loss and the target price."""
    config = _load_config_or_exit(config_path)
    engine = _build_engine_or_exit(config, stock, direction, entry_price, quantity, stop_loss, target)
    currency = config.reporting.currency_symbol

    _print_levels(engine, currency)
    points = engine.curve(steps or config.simulation.curve_steps)
    if not points:
        console.print("[yellow]Target price is not above the stop-loss. No curve to sample.[/yellow]")
        return
    _print_curve(points, currency)


@app.command()
def history(config_path: Path = CONFIG_OPTION):
    """List the logged trades and their summary."""
    config = _load_config_or_exit(config_path)
    entries = _open_store_or_exit(config).list()
    currency = config.reporting.currency_symbol

    if not entries:
        console.print("No trades logged yet.")
        return

    table = Table(title="Trade History")
    for column in ("Stock", "Type", "Net P/L", "Cumulative", "Entry/Exit", "Charges"):
        table.add_column(column)
    cumulative = calculate_cumulative_pnl(entries)["cumulative"].tolist()
    # Newest first; the running total still accumulates in log order.
    for entry, running in reversed(list(zip(entries, cumulative))):
        colour = "green" if entry.net_pnl >= 0 else "red"
        table.add_row(
            entry.stock,
            entry.direction.value,
            f"[{colour}]{format_currency(entry.net_pnl, currency)}[/{colour}]",
            format_currency(running, currency),
            f"{format_currency(entry.entry_price, currency)} / {format_currency(entry.exit_price, currency)}",
            format_currency(entry.total_charges, currency),
        )
    console.print(table)

    summary = summarize_history(entries)
    console.print(f"Total trades: {summary['total_trades']}")
    console.print(f"Total charges: {format_currency(summary['total_charges'], currency)}")
    console.print(f"Total net P/L: {format_currency(summary['total_net_pnl'], currency)}")
    console.print(f"Win rate: {summary['win_rate'] * 100:.2f}%")


@app.command(name="clear-history")
def clear_history(config_path: Path = CONFIG_OPTION):
    """Delete every logged trade."""
    config = _load_config_or_exit(config_path)
    store = _open_store_or_exit(config)
    try:
        store.clear()
    except HistoryStoreError as e:
        console.print(f"[bold red]History Error:[/bold red] {e}")
        raise typer.Exit(code=1)
    console.print("[bold green]Trade history cleared.[/bold green]")


@app.command()
def export(
    config_path: Path = CONFIG_OPTION,
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Overrides reporting.output_dir."),
):
    """Write the configured report formats for the trade history."""
    config = _load_config_or_exit(config_path)
    entries = _open_store_or_exit(config).list()

    run_dir = output_dir or config.reporting.output_dir
    console.print(f"Reports will be saved to: [cyan]{run_dir}[/cyan]")
    generate_all_reports(config, entries, run_dir, console)


@app.command()
def share(config_path: Path = CONFIG_OPTION):
    """Print a shareable text summary of the trade history to stdout."""
    config = _load_config_or_exit(config_path)
    entries = _open_store_or_exit(config).list()
    if not entries:
        console.print("[yellow]Trade history is empty. Nothing to share.[/yellow]")
        raise typer.Exit()
    typer.echo(format_share_text(entries, date.today(), config.reporting.currency_symbol))


if __name__ == "__main__":
    app()
