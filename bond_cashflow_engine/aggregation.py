from __future__ import annotations

import pandas as pd
from dataclasses import asdict, dataclass, fields
from typing import List

from .bonds import CURRENCIES
from .cashflows import CashFlowPayment, cash_flow_table
from .utils import to_day


PERIOD_TYPES = ("month", "quarter", "half-year", "year")
COMPONENTS = ("principal", "interest", "total")


@dataclass(frozen=True)
class AggregatedCashFlow:
    period: str
    usd_principal: float = 0.0
    usd_interest: float = 0.0
    usd_total: float = 0.0
    eur_principal: float = 0.0
    eur_interest: float = 0.0
    eur_total: float = 0.0


def period_label(date: pd.Timestamp, period_type: str) -> str:
    """
    month: YYYY-MM, quarter: YYYY-Qn, half-year: YYYY-H1/H2, year: YYYY.
    Zero padding keeps lexicographic order chronological.
    """
    d = to_day(date)
    if period_type == "month":
        return f"{d.year}-{d.month:02d}"
    if period_type == "quarter":
        return f"{d.year}-Q{(d.month - 1) // 3 + 1}"
    if period_type == "half-year":
        return f"{d.year}-{'H1' if d.month <= 6 else 'H2'}"
    if period_type == "year":
        return f"{d.year}"
    raise ValueError(f"Unsupported period type: {period_type!r} (expected one of {', '.join(PERIOD_TYPES)})")


def aggregate_cash_flows(cash_flows: List[CashFlowPayment], period_type: str = "year") -> List[AggregatedCashFlow]:
    """
    Sum principal/interest/total per period label and currency.
    USD and EUR are never mixed; a currency absent from a period reports zeros.
    """
    if period_type not in PERIOD_TYPES:
        raise ValueError(f"Unsupported period type: {period_type!r} (expected one of {', '.join(PERIOD_TYPES)})")

    if not cash_flows:
        return []

    cf = cash_flow_table(cash_flows)
    cf["period"] = [period_label(d, period_type) for d in cf["date"]]

    sums = cf.groupby(["period", "currency"])[list(COMPONENTS)].sum().unstack("currency", fill_value=0.0)
    sums = sums.sort_index()

    out: List[AggregatedCashFlow] = []
    for period, row in sums.iterrows():
        values = {}
        for ccy in CURRENCIES:
            for comp in COMPONENTS:
                key = (comp, ccy)
                values[f"{ccy.lower()}_{comp}"] = float(row[key]) if key in row.index else 0.0
        out.append(AggregatedCashFlow(period=str(period), **values))
    return out


def aggregate_totals(aggregated: List[AggregatedCashFlow]) -> AggregatedCashFlow:
    """Grand total row across all periods, labelled TOTAL."""
    totals = dict.fromkeys((f.name for f in _amount_fields()), 0.0)
    for a in aggregated:
        for name in totals:
            totals[name] += getattr(a, name)
    return AggregatedCashFlow(period="TOTAL", **totals)


def aggregated_frame(aggregated: List[AggregatedCashFlow]) -> pd.DataFrame:
    cols = ["period"] + [f.name for f in _amount_fields()]
    return pd.DataFrame([asdict(a) for a in aggregated], columns=cols)


def _amount_fields():
    return [f for f in fields(AggregatedCashFlow) if f.name != "period"]
