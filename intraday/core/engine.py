"""
Trade economics: stop-loss and target levels, and the P/L of a trade at any
simulated exit price after brokerage and statutory charges.

Everything here is pure. Inputs are assumed to be validated already
(see `intraday.types.TradeInput`).
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import List, Optional, Tuple

import numpy as np

from intraday.charges import ChargeSchedule
from intraday.core.journal import build_log_entry
from intraday.types import (
    ChargeBreakdown,
    CurvePoint,
    DerivedLevels,
    Direction,
    PnlBreakdown,
    TradeInput,
    TradeLogEntry,
)

__all__ = [
    "DEFAULT_STOP_LOSS_PCT",
    "DEFAULT_TARGET_PCT",
    "DEFAULT_CURVE_STEPS",
    "resolve_percentages",
    "derive_levels",
    "project",
    "sample_curve",
    "TradeEconomicsEngine",
]

log = logging.getLogger(__name__)

DEFAULT_STOP_LOSS_PCT = 3.0
DEFAULT_TARGET_PCT = 10.0
DEFAULT_CURVE_STEPS = 50

_CENTS = Decimal("0.01")
# Wide enough for the integer digits of any finite float plus two decimals.
_CENTS_CONTEXT = Context(prec=320, rounding=ROUND_HALF_UP)


def resolve_percentages(trade: TradeInput) -> Tuple[float, float]:
    """Returns (stop_loss_pct, target_pct), substituting defaults for missing values."""
    # An explicit 0 is kept as is; only a missing value falls back.
    stop_loss_pct = DEFAULT_STOP_LOSS_PCT if trade.stop_loss_pct is None else trade.stop_loss_pct
    target_pct = DEFAULT_TARGET_PCT if trade.target_pct is None else trade.target_pct
    return stop_loss_pct, target_pct


def _quantize2(value: float) -> Decimal:
    # Half away from zero on the exact binary value, so 100.125 becomes 100.13
    # where round() would give 100.12.
    return Decimal(value).quantize(_CENTS, context=_CENTS_CONTEXT)


def _round2(value: float) -> float:
    return float(_quantize2(value))


def _format_ratio(risk_per_unit: float, reward_per_unit: float) -> str:
    if risk_per_unit > 0:
        return f"1:{_quantize2(reward_per_unit / risk_per_unit)}"
    return "1:∞"


def derive_levels(trade: TradeInput, schedule: ChargeSchedule) -> DerivedLevels:
    """
    Computes the stop-loss, target, position value and risk/reward ratio.

    The schedule does not influence the levels; it is accepted so that levels
    are always derived from the same (trade, schedule) pair they are later
    projected with.
    """
    stop_loss_pct, target_pct = resolve_percentages(trade)
    entry = trade.entry_price

    if trade.direction is Direction.LONG:
        stop_loss = entry * (1 - stop_loss_pct / 100)
        target = entry * (1 + target_pct / 100)
    else:
        stop_loss = entry * (1 + stop_loss_pct / 100)
        target = entry * (1 - target_pct / 100)

    risk_per_unit = abs(entry - stop_loss)
    reward_per_unit = abs(target - entry)

    levels = DerivedLevels(
        stop_loss_price=_round2(stop_loss),
        target_price=_round2(target),
        position_value=entry * trade.quantity,
        risk_reward_ratio=_format_ratio(risk_per_unit, reward_per_unit),
    )
    log.debug(f"Derived levels for {trade.stock} ({trade.direction.value}): {levels}")
    return levels


def project(
    trade: TradeInput,
    schedule: ChargeSchedule,
    levels: DerivedLevels,
    exit_price: float,
) -> PnlBreakdown:
    """
    Computes the full P/L breakdown if the trade were closed at `exit_price`.

    Turnover bases:
        buy brokerage, stamp duty   -> buy turnover (entry notional)
        sell brokerage, STT         -> sell turnover (exit notional)
        exchange fee                -> buy + sell turnover
        GST                         -> brokerage + exchange fee
    """
    price_diff = exit_price - trade.entry_price
    if trade.direction is Direction.LONG:
        gross_pnl = trade.quantity * price_diff
    else:
        gross_pnl = trade.quantity * -price_diff

    buy_turnover = levels.position_value
    sell_turnover = trade.quantity * exit_price

    brokerage = schedule.buy_brokerage.apply(buy_turnover) + schedule.sell_brokerage.apply(sell_turnover)
    stt = schedule.securities_transaction_tax.apply(sell_turnover)
    stamp_duty = schedule.stamp_duty.apply(buy_turnover)
    exchange_fee = schedule.exchange_fee.apply(buy_turnover + sell_turnover)
    # GST is levied on the fees only, so it needs brokerage and exchange fee first.
    gst = schedule.goods_and_services_tax.apply(brokerage + exchange_fee)

    total_charges = brokerage + stt + gst + stamp_duty + exchange_fee
    net_pnl = gross_pnl - total_charges
    pnl_pct = (net_pnl / levels.position_value) * 100 if levels.position_value > 0 else 0.0

    return PnlBreakdown(
        gross_pnl=gross_pnl,
        net_pnl=net_pnl,
        total_charges=total_charges,
        pnl_pct=pnl_pct,
        charges=ChargeBreakdown(
            brokerage=brokerage,
            securities_transaction_tax=stt,
            goods_and_services_tax=gst,
            stamp_duty=stamp_duty,
            exchange_fee=exchange_fee,
        ),
    )


def sample_curve(
    trade: TradeInput,
    schedule: ChargeSchedule,
    levels: DerivedLevels,
    steps: int = DEFAULT_CURVE_STEPS,
) -> List[CurvePoint]:
    """
    Samples net P/L over [stop_loss_price, target_price] in `steps` equal steps.

    Returns `steps + 1` points with price and net P/L rounded to 2 decimals,
    or an empty list when the target does not lie above the stop-loss
    (e.g. every SHORT trade with positive percentages).
    """
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")

    price_range = levels.target_price - levels.stop_loss_price
    if price_range <= 0:
        return []

    step = price_range / steps
    prices = levels.stop_loss_price + np.arange(steps + 1) * step
    return [
        CurvePoint(
            price=_round2(float(price)),
            net_pnl=_round2(project(trade, schedule, levels, float(price)).net_pnl),
        )
        for price in prices
    ]


@dataclass(frozen=True)
class TradeEconomicsEngine:
    """
    A (trade, schedule) pair with its levels derived once.

    Build a new engine whenever the trade or the schedule changes; the
    instance itself can be projected any number of times.
    """
    trade: TradeInput
    schedule: ChargeSchedule
    levels: DerivedLevels = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "levels", derive_levels(self.trade, self.schedule))

    def project(self, exit_price: float) -> PnlBreakdown:
        return project(self.trade, self.schedule, self.levels, exit_price)

    def curve(self, steps: int = DEFAULT_CURVE_STEPS) -> List[CurvePoint]:
        return sample_curve(self.trade, self.schedule, self.levels, steps)

    def log_entry(
        self,
        exit_price: float,
        entry_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> TradeLogEntry:
        """Snapshots the trade at `exit_price` for the history log."""
        pnl = self.project(exit_price)
        return build_log_entry(self.trade, self.levels, exit_price, pnl, entry_id, created_at)
