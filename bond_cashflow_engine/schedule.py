from __future__ import annotations

import pandas as pd
from typing import List, Set

from .bonds import Bond
from .errors import EmptySchedule
from .utils import iter_months, to_day


COUPON_PAYMENT_DAY = 9


def interest_payment_dates(
    bond: Bond,
    start_date: pd.Timestamp,
    end_date: pd.Timestamp,
    payment_day: int = COUPON_PAYMENT_DAY,
) -> List[pd.Timestamp]:
    """
    Coupon dates inside [start_date, end_date].

    The month walk stops one day past the last amortization so the final
    amortization month is always visited.
    """
    if not bond.amortization_schedule:
        raise EmptySchedule(bond.bond_id)

    start_date = to_day(start_date)
    end_date = to_day(end_date)

    walk_start = max(bond.issue_date, start_date)
    upper = min(bond.amortization_schedule[-1].date + pd.Timedelta(days=1), end_date)

    dates: List[pd.Timestamp] = []
    for cursor in iter_months(walk_start, upper):
        if cursor.month not in bond.interest_payment_months:
            continue
        d = pd.Timestamp(year=cursor.year, month=cursor.month, day=payment_day)
        if start_date <= d <= end_date:
            dates.append(d)
    return dates


def amortization_dates(bond: Bond, start_date: pd.Timestamp, end_date: pd.Timestamp) -> List[pd.Timestamp]:
    start_date = to_day(start_date)
    end_date = to_day(end_date)
    return [p.date for p in bond.amortization_schedule if start_date <= p.date <= end_date]


def scheduled_payment_dates(
    bond: Bond,
    start_date: pd.Timestamp,
    end_date: pd.Timestamp,
    payment_day: int = COUPON_PAYMENT_DAY,
) -> List[pd.Timestamp]:
    """Sorted, de-duplicated union of coupon and amortization dates."""
    dates: Set[pd.Timestamp] = set(interest_payment_dates(bond, start_date, end_date, payment_day))
    dates.update(amortization_dates(bond, start_date, end_date))
    return sorted(dates)
