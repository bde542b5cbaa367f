"""
Assembly of trade log entries from a simulation snapshot.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from intraday.types import DerivedLevels, PnlBreakdown, TradeInput, TradeLogEntry

__all__ = ["build_log_entry"]


def build_log_entry(
    trade: TradeInput,
    levels: DerivedLevels,
    exit_price: float,
    pnl: PnlBreakdown,
    entry_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> TradeLogEntry:
    """
    Concatenates the trade input, its levels, the exit price and the P/L at
    that price into one immutable log entry.

    A random id and the current UTC time are used unless given explicitly.
    """
    return TradeLogEntry(
        id=entry_id or uuid.uuid4().hex,
        created_at=created_at or datetime.now(timezone.utc),
        exit_price=exit_price,
        **trade.model_dump(),
        **levels.model_dump(),
        **pnl.model_dump(),
    )
