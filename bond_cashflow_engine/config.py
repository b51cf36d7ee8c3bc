from __future__ import annotations

import pathlib
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Optional

import pandas as pd
import yaml


DEFAULT_END_DATE = pd.Timestamp("2050-01-01")


@dataclass(frozen=True)
class EngineSettings:
    usd_to_eur_rate: float = 0.85
    discount_rate: float = 0.08
    default_end_date: pd.Timestamp = DEFAULT_END_DATE
    coupon_payment_day: int = 9
    log_level: str = "WARNING"
    valuation_date: Optional[pd.Timestamp] = None  # None = today
    demo_holdings: Dict[str, float] = field(
        default_factory=lambda: {
            "USD-STEP-UP-2030": 1000.0,
            "USD-STEP-UP-2035": 1000.0,
            "USD-STEP-UP-2038": 1000.0,
            "EUR-STEP-UP-2030": 1000.0,
        }
    )


def load_settings(path: str | pathlib.Path) -> EngineSettings:
    """
    Read a YAML settings file over the defaults.

    Unknown keys are rejected. Raises FileNotFoundError if the file is absent.
    """
    p = pathlib.Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping: {p}")

    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown settings key(s): {', '.join(unknown)}")

    values = dict(raw)
    if values.get("valuation_date") is not None:
        values["valuation_date"] = pd.Timestamp(values["valuation_date"]).normalize()
    if "default_end_date" in values:
        values["default_end_date"] = pd.Timestamp(values["default_end_date"])
    if "demo_holdings" in values:
        values["demo_holdings"] = {str(k): float(v) for k, v in (values["demo_holdings"] or {}).items()}
    for key in ("usd_to_eur_rate", "discount_rate"):
        if key in values:
            values[key] = float(values[key])
    if "coupon_payment_day" in values:
        day = int(values["coupon_payment_day"])
        if not (1 <= day <= 28):
            raise ValueError("coupon_payment_day must be between 1 and 28")
        values["coupon_payment_day"] = day
    if "log_level" in values:
        values["log_level"] = str(values["log_level"]).upper()

    if values.get("usd_to_eur_rate", 1.0) <= 0:
        raise ValueError("usd_to_eur_rate must be positive")

    return replace(EngineSettings(), **values)
