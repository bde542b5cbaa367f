"""
Aggregate statistics over the trade history.

This module turns logged simulations into pandas frames and summary numbers
used by the CLI and the report writers.
"""
from typing import Any, Dict, List

import pandas as pd

from intraday.types import TradeLogEntry

__all__ = [
    "history_frame",
    "calculate_cumulative_pnl",
    "summarize_history",
]


def history_frame(entries: List[TradeLogEntry]) -> pd.DataFrame:
    """
    Flattens log entries into a DataFrame, one row per entry.

    The per-category charges become top-level columns. Returns an empty
    DataFrame if the history is empty.
    """
    if not entries:
        return pd.DataFrame()

    records = []
    for entry in entries:
        record = entry.model_dump(exclude={"charges"})
        record["direction"] = entry.direction.value
        record.update(entry.charges.model_dump())
        records.append(record)

    df = pd.DataFrame(records)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    return df


def calculate_cumulative_pnl(entries: List[TradeLogEntry]) -> pd.DataFrame:
    """
    Per-trade and running net P/L in log order.

    Returns a DataFrame with columns:
        - name: short label, first five characters of the stock plus "..."
        - pnl: net P/L of the trade
        - cumulative: running total of net P/L
    """
    if not entries:
        return pd.DataFrame(columns=["name", "pnl", "cumulative"])

    df = pd.DataFrame({
        "name": [f"{e.stock[:5]}..." for e in entries],
        "pnl": [e.net_pnl for e in entries],
    })
    df["cumulative"] = df["pnl"].cumsum()
    return df


def summarize_history(entries: List[TradeLogEntry]) -> Dict[str, Any]:
    """
    Summary metrics of the whole history.

    A trade counts as a win when its net P/L is not negative.
    """
    if not entries:
        return {
            "total_trades": 0,
            "total_gross_pnl": 0.0,
            "total_net_pnl": 0.0,
            "total_charges": 0.0,
            "win_rate": 0.0,
            "best_net_pnl": 0.0,
            "worst_net_pnl": 0.0,
        }

    df = history_frame(entries)
    return {
        "total_trades": int(len(df)),
        "total_gross_pnl": float(df["gross_pnl"].sum()),
        "total_net_pnl": float(df["net_pnl"].sum()),
        "total_charges": float(df["total_charges"].sum()),
        "win_rate": float((df["net_pnl"] >= 0).mean()),
        "best_net_pnl": float(df["net_pnl"].max()),
        "worst_net_pnl": float(df["net_pnl"].min()),
    }
