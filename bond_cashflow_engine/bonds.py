from __future__ import annotations

import math
import pandas as pd
from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import EmptySchedule, NoApplicableRatePeriod
from .utils import to_day


CURRENCIES = ("USD", "EUR")


@dataclass(frozen=True)
class InterestRatePeriod:
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    rate: float  # annual, decimal, e.g. 0.0125 = 1.25%

    def __post_init__(self):
        object.__setattr__(self, "start_date", to_day(self.start_date))
        object.__setattr__(self, "end_date", to_day(self.end_date))


@dataclass(frozen=True)
class AmortizationPayment:
    date: pd.Timestamp
    percentage: float  # fraction of original face, e.g. 0.08 = 8%

    def __post_init__(self):
        object.__setattr__(self, "date", to_day(self.date))


@dataclass(frozen=True)
class Bond:
    bond_id: str
    name: str
    currency: str
    issue_date: pd.Timestamp
    max_amount: float  # millions
    interest_rate_periods: Tuple[InterestRatePeriod, ...]
    amortization_schedule: Tuple[AmortizationPayment, ...]
    interest_payment_months: Tuple[int, ...] = field(default=(1, 7))

    def __post_init__(self):
        if self.currency not in CURRENCIES:
            raise ValueError(f"{self.bond_id}: unsupported currency {self.currency!r}")
        object.__setattr__(self, "issue_date", to_day(self.issue_date))
        object.__setattr__(self, "interest_rate_periods", tuple(self.interest_rate_periods))
        object.__setattr__(self, "amortization_schedule", tuple(self.amortization_schedule))
        object.__setattr__(self, "interest_payment_months", tuple(int(m) for m in self.interest_payment_months))

    @property
    def maturity(self) -> pd.Timestamp:
        if not self.amortization_schedule:
            raise EmptySchedule(self.bond_id)
        return self.amortization_schedule[-1].date


def rate_for_date(bond: Bond, date: pd.Timestamp) -> float:
    """
    Annual coupon rate applicable on `date`.

    Periods are [start, end); the final period's end date is also accepted so
    that the maturity payment resolves to the last step of the coupon ladder.
    """
    date = to_day(date)

    for period in bond.interest_rate_periods:
        if period.start_date <= date < period.end_date:
            return period.rate

    if bond.interest_rate_periods and date == bond.interest_rate_periods[-1].end_date:
        return bond.interest_rate_periods[-1].rate

    raise NoApplicableRatePeriod(bond.bond_id, date)


def outstanding_principal(bond: Bond, date: pd.Timestamp, initial_principal: float) -> float:
    """Principal still outstanding after every amortization due on or before `date`."""
    date = to_day(date)
    if date < bond.issue_date:
        return initial_principal

    amortized = sum(p.percentage for p in bond.amortization_schedule if p.date <= date)
    return initial_principal * (1.0 - amortized)


def amortization_on(bond: Bond, date: pd.Timestamp):
    """The amortization falling exactly on `date`, or None."""
    date = to_day(date)
    for p in bond.amortization_schedule:
        if p.date == date:
            return p
    return None


def bond_qc_flags(bond: Bond, tol: float = 1e-9) -> List[str]:
    flags: List[str] = []

    sched = bond.amortization_schedule
    if not sched:
        flags.append("EMPTY_SCHEDULE")
    else:
        if not math.isclose(sum(p.percentage for p in sched), 1.0, abs_tol=tol):
            flags.append("AMORT_SUM")
        if any(sched[i].date >= sched[i + 1].date for i in range(len(sched) - 1)):
            flags.append("AMORT_ORDER")

    periods = bond.interest_rate_periods
    if not periods or periods[0].start_date > bond.issue_date:
        flags.append("RATE_GAP")
    elif any(periods[i].end_date != periods[i + 1].start_date for i in range(len(periods) - 1)):
        flags.append("RATE_GAP")
    elif sched and periods[-1].end_date < sched[-1].date:
        flags.append("RATE_GAP")

    if not bond.interest_payment_months or any(not (1 <= m <= 12) for m in bond.interest_payment_months):
        flags.append("BAD_MONTHS")

    if any(not (0.0 <= p.rate <= 0.25) for p in periods):
        flags.append("BAD_RATE")

    return flags


def validate_bond(bond: Bond) -> None:
    flags = bond_qc_flags(bond)
    if "EMPTY_SCHEDULE" in flags:
        raise EmptySchedule(bond.bond_id)
    if flags:
        raise ValueError(f"{bond.bond_id}: failed QC checks: {'|'.join(flags)}")
