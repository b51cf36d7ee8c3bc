from __future__ import annotations

import logging
import pandas as pd
from dataclasses import dataclass
from typing import List, Optional

from .bonds import CURRENCIES, Bond, amortization_on, rate_for_date
from .config import DEFAULT_END_DATE
from .schedule import COUPON_PAYMENT_DAY, scheduled_payment_dates
from .utils import to_day, today, yearfrac

logger = logging.getLogger(__name__)

INTEREST_DAY_COUNT = "ACT/360"


@dataclass(frozen=True)
class CashFlowPayment:
    date: pd.Timestamp
    bond_id: str
    principal: float
    interest: float
    total: float
    currency: str

    def __post_init__(self):
        if self.currency not in CURRENCIES:
            raise ValueError(f"{self.bond_id}: unsupported currency {self.currency!r}")
        object.__setattr__(self, "date", to_day(self.date))


def generate_cash_flows(
    bond: Bond,
    initial_principal: float,
    start_date: Optional[pd.Timestamp] = None,
    end_date: Optional[pd.Timestamp] = None,
    payment_day: int = COUPON_PAYMENT_DAY,
) -> List[CashFlowPayment]:
    """
    Principal + interest payments for one bond inside [start_date, end_date].

    Interest accrues on the running outstanding balance from the previous
    payment (issue date for the first one) at actual days / 360, using the
    rate in force on the payment date. Amortizations pay a fixed share of
    the initial principal.

    NoApplicableRatePeriod propagates and aborts the whole bond.
    """
    start_date = today() if start_date is None else to_day(start_date)
    end_date = DEFAULT_END_DATE if end_date is None else to_day(end_date)

    outstanding = float(initial_principal)
    last_payment = bond.issue_date

    out: List[CashFlowPayment] = []
    for d in scheduled_payment_dates(bond, start_date, end_date, payment_day):
        amort = amortization_on(bond, d)
        principal = initial_principal * amort.percentage if amort is not None else 0.0

        rate = rate_for_date(bond, d)
        interest = outstanding * rate * yearfrac(last_payment, d, INTEREST_DAY_COUNT)

        out.append(
            CashFlowPayment(
                date=d,
                bond_id=bond.bond_id,
                principal=principal,
                interest=interest,
                total=principal + interest,
                currency=bond.currency,
            )
        )

        outstanding -= principal
        last_payment = d

    logger.debug(
        "%s: %d payments between %s and %s for principal %.2f",
        bond.bond_id, len(out), start_date.date(), end_date.date(), initial_principal,
    )
    return out


def cash_flow_table(cash_flows: List[CashFlowPayment]) -> pd.DataFrame:
    cols = ["date", "bond_id", "currency", "principal", "interest", "total"]
    rows = [(cf.date, cf.bond_id, cf.currency, cf.principal, cf.interest, cf.total) for cf in cash_flows]
    return pd.DataFrame(rows, columns=cols)
