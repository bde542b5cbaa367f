"""
Shared data structures for the application.
"""
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Direction",
    "TradeInput",
    "DerivedLevels",
    "ChargeBreakdown",
    "PnlBreakdown",
    "CurvePoint",
    "TradeLogEntry",
]


class Direction(str, Enum):
    """LONG profits when the price rises, SHORT when it falls."""
    LONG = "LONG"
    SHORT = "SHORT"


class TradeInput(BaseModel):
    """
    A hypothetical intraday trade as entered by the user.
    """
    model_config = ConfigDict(frozen=True)

    stock: str = Field(..., min_length=1, description="The stock symbol or name.")
    direction: Direction = Field(..., description="LONG or SHORT.")
    entry_price: float = Field(..., gt=0, allow_inf_nan=False, description="The price at which the trade is entered.")
    quantity: int = Field(..., gt=0, description="Number of units held.")
    stop_loss_pct: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Stop-loss distance in percent.")
    target_pct: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Target distance in percent.")


class DerivedLevels(BaseModel):
    """Static levels of a trade, independent of the simulated market price."""
    model_config = ConfigDict(frozen=True)

    stop_loss_price: float
    target_price: float
    position_value: float
    risk_reward_ratio: str


class ChargeBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    brokerage: float
    securities_transaction_tax: float
    goods_and_services_tax: float
    stamp_duty: float
    exchange_fee: float


class PnlBreakdown(BaseModel):
    """Profit and loss of a trade at one simulated exit price."""
    model_config = ConfigDict(frozen=True)

    gross_pnl: float
    net_pnl: float
    total_charges: float
    pnl_pct: float
    charges: ChargeBreakdown


class CurvePoint(NamedTuple):
    price: float
    net_pnl: float


class TradeLogEntry(BaseModel):
    """
    An immutable snapshot of one completed simulation.

    Holds the original trade input, the derived levels, the chosen exit price
    and the P/L breakdown at that price.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique identifier of the entry.")
    created_at: datetime = Field(..., description="UTC creation time; orders the history.")

    stock: str
    direction: Direction
    entry_price: float
    quantity: int
    stop_loss_pct: Optional[float] = None
    target_pct: Optional[float] = None

    stop_loss_price: float
    target_price: float
    position_value: float
    risk_reward_ratio: str

    exit_price: float
    gross_pnl: float
    net_pnl: float
    total_charges: float
    pnl_pct: float
    charges: ChargeBreakdown
