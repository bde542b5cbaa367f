"""
Configuration loading and validation for the intraday simulator.

This module uses standard library dataclasses for configuration objects,
with explicit, pure validation functions run on the raw YAML before any
object is built.
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Dict, Any, Type, cast

import yaml

from intraday.charges import CHARGE_CATEGORIES, ChargeSchedule

__all__ = ["load_config", "Config"]

OUTPUT_FORMATS = ("csv", "json", "markdown")


# §1. Nested Configuration Dataclasses
# --------------------------------------------------------------------------------------
# The charge schedule itself (intraday.charges) is a frozen dataclass and is
# embedded directly.


@dataclass(frozen=True)
class SimulationConfig:
    curve_steps: int = 50


@dataclass(frozen=True)
class HistoryConfig:
    path: Path


@dataclass(frozen=True)
class ReportingConfig:
    output_dir: Path
    output_formats: List[Literal["csv", "json", "markdown"]]
    currency_symbol: str = "₹"


# §2. Top-Level Configuration
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    """The root configuration object, composing all nested sections."""
    charges: ChargeSchedule
    simulation: SimulationConfig
    history: HistoryConfig
    reporting: ReportingConfig


# §3. Validation and Loading
# --------------------------------------------------------------------------------------


def _from_dict(data_class: Type[Any], data: Any) -> Any:
    """Recursively creates nested dataclasses from a dictionary."""
    if isinstance(data, dict) and dataclasses.is_dataclass(data_class):
        field_types = {f.name: f.type for f in dataclasses.fields(data_class)}

        kwargs = {}
        for k, v in data.items():
            field_type = field_types.get(k)
            # Unknown keys are passed through so that the dataclass
            # constructor raises a TypeError, which the caller handles.
            kwargs[k] = _from_dict(field_type, v) if field_type else v
        return data_class(**kwargs)

    # Convert path strings to Path objects
    if isinstance(data, str) and data_class is Path:
        return Path(data)
    return data


def _validate_charges(charges: Any) -> None:
    if not isinstance(charges, dict):
        raise ValueError("charges must be a mapping of category to rule.")

    unknown = set(charges) - set(CHARGE_CATEGORIES)
    if unknown:
        raise ValueError(f"Unknown charge categories: {sorted(unknown)}")

    for name, rule in charges.items():
        if not isinstance(rule, dict) or "amount" not in rule:
            raise ValueError(f"charges.{name} must define an 'amount'")
        if not isinstance(rule["amount"], (int, float)) or isinstance(rule["amount"], bool):
            raise ValueError(f"charges.{name}.amount must be a number")
        if rule["amount"] < 0:
            raise ValueError(f"charges.{name}.amount must be >= 0")
        if not isinstance(rule.get("is_percentage", False), bool):
            raise ValueError(f"charges.{name}.is_percentage must be true or false")


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Performs simple, explicit validation checks on the raw config dictionary.
    Fail fast on any logical inconsistencies.
    """
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a YAML object.")

    _validate_charges(cfg.get("charges"))

    for section in ("history", "reporting"):
        if not isinstance(cfg.get(section), dict):
            raise ValueError(f"{section} must be a mapping")
    simulation = cfg.get("simulation")
    if simulation is not None and not isinstance(simulation, dict):
        raise ValueError("simulation must be a mapping")

    curve_steps = (simulation or {}).get("curve_steps", 50)
    if not isinstance(curve_steps, int) or isinstance(curve_steps, bool) or curve_steps < 1:
        raise ValueError("simulation.curve_steps must be a positive integer")

    formats = cfg["reporting"].get("output_formats") or []
    if not isinstance(formats, list):
        raise ValueError("reporting.output_formats must be a list")
    bad_formats = [f for f in formats if f not in OUTPUT_FORMATS]
    if bad_formats:
        raise ValueError(f"reporting.output_formats contains unsupported formats: {bad_formats}")


def _normalise(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Builds the charge schedule and fills in optional sections before conversion."""
    # Categories left out of the file are charged a flat zero.
    charges = ChargeSchedule.from_mapping(cfg["charges"])
    return {**cfg, "charges": charges, "simulation": cfg.get("simulation") or {}}


# impure
def load_config(config_path: Path) -> Config:
    """
    Loads and validates a YAML configuration file into a Config object.
    #impure: Reads from the filesystem.
    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {config_path}: {e}") from e

    # Perform validation before trying to create the objects
    _validate_config(raw_config)

    # Convert the raw dictionary to nested dataclasses
    try:
        # We cast here because _from_dict is too dynamic for mypy to track types.
        return cast(Config, _from_dict(Config, _normalise(raw_config)))
    except (TypeError, KeyError) as e:
        raise ValueError(f"Configuration validation failed: missing or invalid key. Details: {e}") from e
