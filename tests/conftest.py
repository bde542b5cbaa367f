"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from intraday.charges import ChargeRule, ChargeSchedule
from intraday.core.engine import TradeEconomicsEngine
from intraday.types import Direction, TradeInput, TradeLogEntry


@pytest.fixture
def flat_brokerage() -> ChargeSchedule:
    """Twenty per leg, nothing else."""
    return ChargeSchedule(buy_brokerage=ChargeRule(20.0), sell_brokerage=ChargeRule(20.0))


@pytest.fixture
def logged_trades(flat_brokerage: ChargeSchedule) -> List[TradeLogEntry]:
    """A winning LONG, a losing SHORT and a winning SHORT, in that order."""
    start = datetime(2024, 3, 1, 9, 15, tzinfo=timezone.utc)
    specs = [
        # gross 300, net 260
        (TradeInput(stock="RELIANCE", direction=Direction.LONG, entry_price=2900.0, quantity=10), 2930.0),
        # gross -50, net -90
        (TradeInput(stock="SBIN", direction=Direction.SHORT, entry_price=600.0, quantity=10, stop_loss_pct=1), 605.0),
        # gross 100, net 60
        (TradeInput(stock="TCS", direction=Direction.SHORT, entry_price=4000.0, quantity=2, target_pct=5), 3950.0),
    ]
    return [
        TradeEconomicsEngine(trade, flat_brokerage).log_entry(
            exit_price, entry_id=f"t{i}", created_at=start + timedelta(minutes=i)
        )
        for i, (trade, exit_price) in enumerate(specs)
    ]
