import math

import pandas as pd
import pytest

from bond_cashflow_engine.bonds import (
    AmortizationPayment,
    Bond,
    InterestRatePeriod,
    bond_qc_flags,
    outstanding_principal,
    rate_for_date,
    validate_bond,
)
from bond_cashflow_engine.data import BONDS, get_bond_by_id
from bond_cashflow_engine.errors import EmptySchedule, NoApplicableRatePeriod, UnknownInstrument
from bond_cashflow_engine.utils import to_day


@pytest.fixture(scope="module")
def step_up_bond():
    """Three-step coupon ladder, two amortizations (40% / 60%)."""
    return Bond(
        bond_id="TEST-STEP",
        name="Test step-up",
        currency="USD",
        issue_date=pd.Timestamp("2020-09-04"),
        max_amount=500.0,
        interest_rate_periods=(
            InterestRatePeriod(pd.Timestamp("2020-09-04"), pd.Timestamp("2021-07-09"), 0.01),
            InterestRatePeriod(pd.Timestamp("2021-07-09"), pd.Timestamp("2022-07-09"), 0.02),
            InterestRatePeriod(pd.Timestamp("2022-07-09"), pd.Timestamp("2023-07-09"), 0.03),
        ),
        amortization_schedule=(
            AmortizationPayment(pd.Timestamp("2022-07-09"), 0.4),
            AmortizationPayment(pd.Timestamp("2023-07-09"), 0.6),
        ),
        interest_payment_months=(1, 7),
    )


@pytest.mark.parametrize("bond", BONDS, ids=lambda b: b.bond_id)
def test_catalog_amortization_sums_to_one(bond):
    total = sum(p.percentage for p in bond.amortization_schedule)
    assert math.isclose(total, 1.0, abs_tol=1e-12), f"{bond.bond_id}: schedule sums to {total}"


@pytest.mark.parametrize("bond", BONDS, ids=lambda b: b.bond_id)
def test_catalog_passes_qc(bond):
    assert bond_qc_flags(bond) == []
    validate_bond(bond)


def test_catalog_lookup():
    assert get_bond_by_id("EUR-STEP-UP-2030").currency == "EUR"
    with pytest.raises(UnknownInstrument):
        get_bond_by_id("ARS-NOPE-2099")


def test_unknown_instrument_is_a_key_error():
    with pytest.raises(KeyError):
        get_bond_by_id("ARS-NOPE-2099")


def test_usd_2038_schedule_strictly_increasing():
    sched = get_bond_by_id("USD-STEP-UP-2038").amortization_schedule
    assert len(sched) == 22
    assert sched[0].date == pd.Timestamp("2027-07-09")
    assert sched[-1].date == pd.Timestamp("2038-01-09")
    assert all(a.date < b.date for a, b in zip(sched, sched[1:]))


def test_rate_on_period_start_uses_that_period(step_up_bond):
    assert rate_for_date(step_up_bond, pd.Timestamp("2020-09-04")) == 0.01
    assert rate_for_date(step_up_bond, pd.Timestamp("2021-07-09")) == 0.02
    assert rate_for_date(step_up_bond, pd.Timestamp("2022-07-09")) == 0.03


def test_rate_day_before_step_uses_previous_period(step_up_bond):
    assert rate_for_date(step_up_bond, pd.Timestamp("2021-07-08")) == 0.01


def test_rate_on_final_end_date_is_inclusive(step_up_bond):
    assert rate_for_date(step_up_bond, pd.Timestamp("2023-07-09")) == 0.03


def test_rate_outside_coverage_raises(step_up_bond):
    with pytest.raises(NoApplicableRatePeriod):
        rate_for_date(step_up_bond, pd.Timestamp("2023-07-10"))
    with pytest.raises(NoApplicableRatePeriod):
        rate_for_date(step_up_bond, pd.Timestamp("2020-09-03"))


def test_rate_ignores_time_of_day(step_up_bond):
    assert rate_for_date(step_up_bond, pd.Timestamp("2023-07-09 18:30")) == 0.03


def test_principal_before_and_at_issue(step_up_bond):
    assert outstanding_principal(step_up_bond, pd.Timestamp("2019-01-01"), 250.0) == 250.0
    assert outstanding_principal(step_up_bond, step_up_bond.issue_date, 250.0) == 250.0


def test_principal_steps_down_on_amortization_dates(step_up_bond):
    assert outstanding_principal(step_up_bond, pd.Timestamp("2022-07-08"), 100.0) == pytest.approx(100.0)
    assert outstanding_principal(step_up_bond, pd.Timestamp("2022-07-09"), 100.0) == pytest.approx(60.0)
    assert outstanding_principal(step_up_bond, pd.Timestamp("2023-07-09"), 100.0) == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("bond", BONDS, ids=lambda b: b.bond_id)
def test_principal_zero_at_maturity(bond):
    assert abs(outstanding_principal(bond, bond.maturity, 1000.0)) < 1e-8


def test_qc_flags_detect_broken_bond():
    bad = Bond(
        bond_id="BROKEN",
        name="Broken",
        currency="EUR",
        issue_date=pd.Timestamp("2020-01-01"),
        max_amount=1.0,
        interest_rate_periods=(
            InterestRatePeriod(pd.Timestamp("2020-01-01"), pd.Timestamp("2021-01-01"), 0.01),
            InterestRatePeriod(pd.Timestamp("2021-02-01"), pd.Timestamp("2022-01-01"), 0.40),
        ),
        amortization_schedule=(
            AmortizationPayment(pd.Timestamp("2021-07-09"), 0.5),
            AmortizationPayment(pd.Timestamp("2021-01-09"), 0.4),
        ),
        interest_payment_months=(1, 13),
    )
    flags = bond_qc_flags(bad)
    assert {"AMORT_SUM", "AMORT_ORDER", "RATE_GAP", "BAD_MONTHS", "BAD_RATE"} <= set(flags)
    with pytest.raises(ValueError):
        validate_bond(bad)


def test_empty_schedule_fails_fast(step_up_bond):
    empty = Bond(**{**step_up_bond.__dict__, "amortization_schedule": ()})
    assert "EMPTY_SCHEDULE" in bond_qc_flags(empty)
    with pytest.raises(EmptySchedule):
        validate_bond(empty)
    with pytest.raises(EmptySchedule):
        _ = empty.maturity


def test_unsupported_currency_rejected(step_up_bond):
    with pytest.raises(ValueError):
        Bond(**{**step_up_bond.__dict__, "currency": "ARS"})


def test_to_day_drops_time_and_timezone():
    assert to_day("2021-01-09 23:59") == pd.Timestamp("2021-01-09")
    # 23:00 in New York is already the next calendar day in UTC
    ny = pd.Timestamp("2021-01-09 23:00", tz="America/New_York")
    assert to_day(ny) == pd.Timestamp("2021-01-10")
    assert to_day(ny).tzinfo is None
