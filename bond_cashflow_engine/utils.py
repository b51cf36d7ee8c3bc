from __future__ import annotations

import pandas as pd
from typing import Iterator, Optional


def to_day(value) -> pd.Timestamp:
    """
    Day-granular timestamp for any date-like input.

    Time-of-day is dropped. Timezone-aware inputs are moved to UTC first and
    returned naive, so two representations of the same calendar day compare equal.
    """
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError("Date is missing (NaT).")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.normalize()


def today() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC").tz_localize(None).normalize()


def yearfrac(start: pd.Timestamp, end: pd.Timestamp, convention: str) -> float:
    """
    Year fraction between two dates under a day count convention.

    Supported:
    - ACT/360     (coupon accrual: actual elapsed days over 360)
    - ACT/365, ACT/365F
    - ACT/365.25  (discounting horizon)
    """
    start = to_day(start)
    end = to_day(end)

    convention = convention.upper().replace(" ", "")
    if end < start:
        raise ValueError(f"end < start: {start=} {end=}")

    days = (end - start).days

    if convention == "ACT/360":
        return days / 360.0

    if convention in ("ACT/365", "ACT/365F"):
        return days / 365.0

    if convention == "ACT/365.25":
        return days / 365.25

    raise ValueError(f"Unsupported day count convention: {convention}")


def first_of_next_month(d: pd.Timestamp) -> pd.Timestamp:
    d = to_day(d)
    if d.month == 12:
        return pd.Timestamp(year=d.year + 1, month=1, day=1)
    return pd.Timestamp(year=d.year, month=d.month + 1, day=1)


def iter_months(start: pd.Timestamp, upper: pd.Timestamp) -> Iterator[pd.Timestamp]:
    """
    Yield a cursor per calendar month: `start` itself, then the 1st of every
    following month, while the cursor is <= upper.
    """
    cursor = to_day(start)
    upper = to_day(upper)
    while cursor <= upper:
        yield cursor
        cursor = first_of_next_month(cursor)


def year_window(start_year: Optional[int], end_year: Optional[int]):
    """(Jan 1 of start_year, Dec 31 of end_year); None for a missing bound."""
    start = pd.Timestamp(year=int(start_year), month=1, day=1) if start_year is not None else None
    end = pd.Timestamp(year=int(end_year), month=12, day=31) if end_year is not None else None
    if start is not None and end is not None and end < start:
        raise ValueError(f"end year {end_year} precedes start year {start_year}")
    return start, end
