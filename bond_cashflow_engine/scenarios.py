from __future__ import annotations

import pandas as pd
from typing import List, Optional, Sequence

from .cashflows import CashFlowPayment
from .utils import to_day, today
from .valuation import DEFAULT_USD_TO_EUR, present_value


DEFAULT_SHIFTS_BP = (-200, -100, -50, 0, 50, 100, 200)


def pv_dv01(
    cash_flows: List[CashFlowPayment],
    discount_rate: float,
    reference_date: Optional[pd.Timestamp] = None,
    usd_to_eur_rate: float = DEFAULT_USD_TO_EUR,
) -> float:
    """PV change (USD) for a +1bp move in the discount rate. Negative for a long book."""
    reference_date = today() if reference_date is None else to_day(reference_date)
    base = present_value(cash_flows, discount_rate, reference_date, usd_to_eur_rate)
    bumped = present_value(cash_flows, discount_rate + 1 / 10000.0, reference_date, usd_to_eur_rate)
    return bumped - base


def run_discount_rate_scenarios(
    cash_flows: List[CashFlowPayment],
    discount_rate: float,
    reference_date: Optional[pd.Timestamp] = None,
    usd_to_eur_rate: float = DEFAULT_USD_TO_EUR,
    shifts_bp: Sequence[float] = DEFAULT_SHIFTS_BP,
) -> pd.DataFrame:
    reference_date = today() if reference_date is None else to_day(reference_date)
    base = present_value(cash_flows, discount_rate, reference_date, usd_to_eur_rate)

    rows = []
    for bp in shifts_bp:
        r = discount_rate + bp / 10000.0
        pv = present_value(cash_flows, r, reference_date, usd_to_eur_rate)
        rows.append(
            {
                "shift_bp": bp,
                "discount_rate": r,
                "pv_usd": pv,
                "pnl_usd": pv - base,
            }
        )

    out = pd.DataFrame(rows)
    return out.sort_values("shift_bp").reset_index(drop=True)
