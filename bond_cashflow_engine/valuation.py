from __future__ import annotations

import numpy as np
import pandas as pd
from typing import List, Optional, Tuple

from scipy.optimize import brentq

from .cashflows import CashFlowPayment, cash_flow_table
from .utils import to_day, today

PV_DAY_BASIS = 365.25
DEFAULT_USD_TO_EUR = 0.85


def _future_flows(
    cash_flows: List[CashFlowPayment],
    reference_date: pd.Timestamp,
    usd_to_eur_rate: float,
) -> Tuple[pd.DataFrame, np.ndarray]:
    """Flows on/after reference_date with USD values and year fractions."""
    cf = cash_flow_table(cash_flows)
    cf = cf[cf["date"] >= reference_date].copy()

    cf["value_usd"] = np.where(cf["currency"] == "EUR", cf["total"] / usd_to_eur_rate, cf["total"]).astype(float)
    cf["years"] = (cf["date"] - reference_date).dt.days.astype(float) / PV_DAY_BASIS
    return cf, cf["years"].to_numpy(dtype=float)


def present_value(
    cash_flows: List[CashFlowPayment],
    discount_rate: float,
    reference_date: Optional[pd.Timestamp] = None,
    usd_to_eur_rate: float = DEFAULT_USD_TO_EUR,
) -> float:
    """
    Present value in USD at `reference_date`.

      DF(t) = (1 + r) ** (-days / 365.25)

    Flows dated before the reference date are ignored. EUR totals are converted
    with USD = EUR / usd_to_eur_rate.
    """
    if usd_to_eur_rate <= 0:
        raise ValueError("usd_to_eur_rate must be positive.")
    if discount_rate <= -1.0:
        raise ValueError("discount_rate must be greater than -100%.")

    reference_date = today() if reference_date is None else to_day(reference_date)
    if not cash_flows:
        return 0.0

    cf, years = _future_flows(cash_flows, reference_date, usd_to_eur_rate)
    dfs = np.power(1.0 + discount_rate, -years)
    return float(np.sum(cf["value_usd"].to_numpy(dtype=float) * dfs))


def present_value_by_bond(
    cash_flows: List[CashFlowPayment],
    discount_rate: float,
    reference_date: Optional[pd.Timestamp] = None,
    usd_to_eur_rate: float = DEFAULT_USD_TO_EUR,
) -> pd.DataFrame:
    """Per-bond PV breakdown (USD). Rows sum to present_value()."""
    reference_date = today() if reference_date is None else to_day(reference_date)
    cols = ["bond_id", "currency", "pv_usd"]
    if not cash_flows:
        return pd.DataFrame(columns=cols)

    cf, years = _future_flows(cash_flows, reference_date, usd_to_eur_rate)
    cf["df"] = np.power(1.0 + discount_rate, -years)
    cf["pv_usd"] = cf["value_usd"] * cf["df"]

    return cf.groupby(["bond_id", "currency"], as_index=False, sort=True)["pv_usd"].sum()[cols]


def implied_discount_rate(
    cash_flows: List[CashFlowPayment],
    target_pv: float,
    reference_date: Optional[pd.Timestamp] = None,
    usd_to_eur_rate: float = DEFAULT_USD_TO_EUR,
    lower: float = -0.99,
    upper: float = 10.0,
) -> float:
    """
    Annual discount rate r such that present_value(cash_flows, r) == target_pv.

    PV is monotone decreasing in r for non-negative flows, so a 1D root solve
    on [lower, upper] is enough.
    """
    reference_date = today() if reference_date is None else to_day(reference_date)
    if target_pv <= 0:
        raise ValueError("target_pv must be positive.")

    def residual(r: float) -> float:
        return present_value(cash_flows, r, reference_date, usd_to_eur_rate) - target_pv

    fa, fb = residual(lower), residual(upper)
    if fa * fb > 0:
        raise ValueError("Root not bracketed: target PV unreachable for these cash flows.")

    return float(brentq(residual, lower, upper, maxiter=300, xtol=1e-14))
