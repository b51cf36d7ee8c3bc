"""
Reference data: Argentine step-up global bonds issued in the 2020 exchange.

Rate ladders and amortization schedules follow the issuance terms
("Condiciones de emisión de los títulos nuevos"). Amounts are in millions.

USD-STEP-UP-2038 amortizes 2027-07-09 .. 2038-01-09 per the issuance terms, so its
flows and PVs differ from tools that place the 22 installments 2027-01-09 .. 2037-07-09.
"""
from __future__ import annotations

import pandas as pd
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .bonds import AmortizationPayment, Bond, InterestRatePeriod
from .errors import UnknownInstrument


ISSUE_DATE = pd.Timestamp("2020-09-04")
INTEREST_PAYMENT_MONTHS = (1, 7)


def _d(year: int, month: int, day: int = 9) -> pd.Timestamp:
    return pd.Timestamp(year=year, month=month, day=day)


def _ladder(steps: Sequence[Tuple[pd.Timestamp, float]], maturity: pd.Timestamp) -> Tuple[InterestRatePeriod, ...]:
    """[(start, rate), ...] -> contiguous periods ending at maturity."""
    ends = [s for s, _ in steps[1:]] + [maturity]
    return tuple(InterestRatePeriod(start, end, rate) for (start, rate), end in zip(steps, ends))


def _semiannual_equal(first_year: int, first_month: int, n: int, pct: Optional[float] = None) -> List[AmortizationPayment]:
    """n equal semiannual installments on the 9th, starting first_year/first_month."""
    pct = 1.0 / n if pct is None else pct
    out = []
    year, month = first_year, first_month
    for _ in range(n):
        out.append(AmortizationPayment(_d(year, month), pct))
        if month == 1:
            month = 7
        else:
            year, month = year + 1, 1
    return out


def _bond(bond_id: str, name: str, currency: str, max_amount: float, periods, schedule) -> Bond:
    return Bond(
        bond_id=bond_id,
        name=name,
        currency=currency,
        issue_date=ISSUE_DATE,
        max_amount=max_amount,
        interest_rate_periods=periods,
        amortization_schedule=tuple(schedule),
        interest_payment_months=INTEREST_PAYMENT_MONTHS,
    )


_NAME_USD = "Bonos Globales de la República Argentina Amortizables en Dólares Estadounidenses Step Up {}"
_NAME_EUR = "Bonos Globales de la República Argentina Amortizables en Euros Step Up {}"


BONDS: Tuple[Bond, ...] = (
    _bond(
        "USD-STEP-UP-2030", _NAME_USD.format(2030), "USD", 16830,
        _ladder(
            [(ISSUE_DATE, 0.00125), (_d(2021, 7), 0.005), (_d(2023, 7), 0.0075), (_d(2027, 7), 0.0175)],
            _d(2030, 7),
        ),
        [AmortizationPayment(_d(2024, 7), 0.04)] + _semiannual_equal(2025, 1, 12, 0.08),
    ),
    _bond(
        "USD-STEP-UP-2035", _NAME_USD.format(2035), "USD", 25689,
        _ladder(
            [
                (ISSUE_DATE, 0.00125), (_d(2021, 7), 0.01125), (_d(2022, 7), 0.015), (_d(2023, 7), 0.03625),
                (_d(2024, 7), 0.04125), (_d(2027, 7), 0.0475), (_d(2028, 7), 0.05),
            ],
            _d(2035, 7),
        ),
        _semiannual_equal(2031, 1, 10),
    ),
    _bond(
        "USD-STEP-UP-2038", _NAME_USD.format(2038), "USD", 12414,
        _ladder(
            [(ISSUE_DATE, 0.00125), (_d(2021, 7), 0.02), (_d(2022, 7), 0.03875), (_d(2023, 7), 0.0425), (_d(2024, 7), 0.05)],
            _d(2038, 7),
        ),
        _semiannual_equal(2027, 7, 22),
    ),
    _bond(
        "USD-STEP-UP-2041", _NAME_USD.format(2041), "USD", 18633,
        _ladder(
            [(ISSUE_DATE, 0.00125), (_d(2021, 7), 0.025), (_d(2022, 7), 0.035), (_d(2029, 7), 0.04875)],
            _d(2041, 7),
        ),
        _semiannual_equal(2028, 1, 28),
    ),
    _bond(
        "USD-STEP-UP-2046", _NAME_USD.format(2046), "USD", 45686,
        _ladder(
            [
                (ISSUE_DATE, 0.00125), (_d(2021, 7), 0.01125), (_d(2022, 7), 0.015), (_d(2023, 7), 0.03625),
                (_d(2024, 7), 0.04125), (_d(2027, 7), 0.04375), (_d(2028, 7), 0.05),
            ],
            _d(2046, 7),
        ),
        _semiannual_equal(2025, 1, 44),
    ),
    _bond(
        "EUR-STEP-UP-2030", _NAME_EUR.format(2030), "EUR", 3100,
        _ladder([(ISSUE_DATE, 0.00125)], _d(2030, 7)),
        [AmortizationPayment(_d(2024, 7), 0.04)] + _semiannual_equal(2025, 1, 12, 0.08),
    ),
)


def get_all_bonds() -> Tuple[Bond, ...]:
    return BONDS


def bonds_by_id(bonds: Optional[Iterable[Bond]] = None) -> Dict[str, Bond]:
    bonds = BONDS if bonds is None else bonds
    return {b.bond_id: b for b in bonds}


def get_bond_by_id(bond_id: str, bonds: Optional[Iterable[Bond]] = None) -> Bond:
    try:
        return bonds_by_id(bonds)[bond_id]
    except KeyError:
        raise UnknownInstrument(bond_id) from None
