"""
Brokerage and statutory charge schedules.

Each charge category is described by a `ChargeRule`: either a flat amount
applied once per trade, or a percentage of a category-specific turnover base.
Which base belongs to which category is decided by the engine, not here.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

__all__ = ["ChargeRule", "ChargeSchedule", "CHARGE_CATEGORIES"]


@dataclass(frozen=True)
class ChargeRule:
    amount: float
    is_percentage: bool = False

    def apply(self, base: float) -> float:
        """Returns the charge for the given turnover base."""
        if self.is_percentage:
            return base * self.amount / 100
        return self.amount


_FLAT_ZERO = ChargeRule(0.0, False)


@dataclass(frozen=True)
class ChargeSchedule:
    """The six charge categories levied on an intraday equity round trip."""
    buy_brokerage: ChargeRule = _FLAT_ZERO
    sell_brokerage: ChargeRule = _FLAT_ZERO
    securities_transaction_tax: ChargeRule = _FLAT_ZERO
    stamp_duty: ChargeRule = _FLAT_ZERO
    exchange_fee: ChargeRule = _FLAT_ZERO
    goods_and_services_tax: ChargeRule = _FLAT_ZERO

    @classmethod
    def zero(cls) -> "ChargeSchedule":
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChargeSchedule":
        """
        Builds a schedule from `{category: {"amount": x, "is_percentage": b}}`.

        Categories that are not given default to a flat zero charge.
        """
        unknown = set(data) - set(CHARGE_CATEGORIES)
        if unknown:
            raise ValueError(f"Unknown charge categories: {sorted(unknown)}")

        rules: Dict[str, ChargeRule] = {}
        for name, raw in data.items():
            try:
                rule = ChargeRule(
                    amount=float(raw["amount"]),
                    is_percentage=bool(raw.get("is_percentage", False)),
                )
            except (TypeError, KeyError) as e:
                raise ValueError(f"Invalid charge rule for '{name}': {raw!r}") from e
            if rule.amount < 0:
                raise ValueError(f"Charge amount for '{name}' must be >= 0, got {rule.amount}")
            rules[name] = rule
        return cls(**rules)

    def to_mapping(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: {"amount": rule.amount, "is_percentage": rule.is_percentage}
            for name, rule in ((f.name, getattr(self, f.name)) for f in fields(self))
        }


CHARGE_CATEGORIES = tuple(f.name for f in fields(ChargeSchedule))
