import numpy as np
import pandas as pd
import pytest

from bond_cashflow_engine.cashflows import CashFlowPayment
from bond_cashflow_engine.portfolio import generate_all_cash_flows
from bond_cashflow_engine.scenarios import pv_dv01, run_discount_rate_scenarios
from bond_cashflow_engine.valuation import implied_discount_rate, present_value, present_value_by_bond


@pytest.fixture(scope="module")
def ref_date():
    return pd.Timestamp("2026-02-13")


@pytest.fixture(scope="module")
def flows():
    holdings = {
        "USD-STEP-UP-2030": 1000.0,
        "USD-STEP-UP-2035": 1000.0,
        "USD-STEP-UP-2038": 1000.0,
        "EUR-STEP-UP-2030": 1000.0,
    }
    return generate_all_cash_flows(holdings, pd.Timestamp("2020-09-04"), pd.Timestamp("2050-01-01"))


def test_zero_rate_unit_fx_is_undiscounted_future_sum(flows, ref_date):
    expected = sum(cf.total for cf in flows if cf.date >= ref_date)
    assert present_value(flows, 0.0, ref_date, 1.0) == pytest.approx(expected, rel=1e-12)


def test_past_flows_are_skipped(ref_date):
    past = [CashFlowPayment(pd.Timestamp("2025-01-09"), "A", 100.0, 1.0, 101.0, "USD")]
    assert present_value(past, 0.05, ref_date) == 0.0


def test_flow_on_reference_date_is_undiscounted(ref_date):
    today_flow = [CashFlowPayment(ref_date, "A", 0.0, 7.0, 7.0, "USD")]
    assert present_value(today_flow, 0.10, ref_date) == pytest.approx(7.0)


def test_single_flow_discount_factor(ref_date):
    d = ref_date + pd.Timedelta(days=730)
    cf = [CashFlowPayment(d, "A", 100.0, 0.0, 100.0, "USD")]
    expected = 100.0 * (1.05) ** (-(730 / 365.25))
    assert present_value(cf, 0.05, ref_date) == pytest.approx(expected, rel=1e-12)


def test_eur_converted_to_usd(ref_date):
    d = ref_date + pd.Timedelta(days=365)
    cf = [CashFlowPayment(d, "E", 85.0, 0.0, 85.0, "EUR")]
    assert present_value(cf, 0.0, ref_date, 0.85) == pytest.approx(100.0)
    assert present_value(cf, 0.0, ref_date, 1.0) == pytest.approx(85.0)


def test_pv_monotone_in_discount_rate(flows, ref_date):
    pvs = [present_value(flows, r, ref_date) for r in (0.0, 0.04, 0.08, 0.12)]
    assert all(a > b for a, b in zip(pvs, pvs[1:])), "PV must fall as the discount rate rises"


def test_invalid_inputs_rejected(flows, ref_date):
    with pytest.raises(ValueError):
        present_value(flows, 0.05, ref_date, usd_to_eur_rate=0.0)
    with pytest.raises(ValueError):
        present_value(flows, -1.0, ref_date)


def test_empty_flows_zero_pv(ref_date):
    assert present_value([], 0.08, ref_date) == 0.0
    assert present_value_by_bond([], 0.08, ref_date).empty


def test_pv_by_bond_reconciles_total(flows, ref_date):
    by_bond = present_value_by_bond(flows, 0.08, ref_date)
    assert set(by_bond["bond_id"]) == {"USD-STEP-UP-2030", "USD-STEP-UP-2035", "USD-STEP-UP-2038", "EUR-STEP-UP-2030"}
    assert np.isfinite(by_bond["pv_usd"]).all()
    assert by_bond["pv_usd"].sum() == pytest.approx(present_value(flows, 0.08, ref_date), rel=1e-12)


def test_implied_discount_rate_recovers_rate(flows, ref_date):
    target = present_value(flows, 0.0725, ref_date)
    r = implied_discount_rate(flows, target, ref_date)
    assert r == pytest.approx(0.0725, abs=1e-9)


def test_implied_discount_rate_unreachable(flows):
    after_everything = pd.Timestamp("2060-01-01")
    with pytest.raises(ValueError):
        implied_discount_rate(flows, 100.0, after_everything)
    with pytest.raises(ValueError):
        implied_discount_rate(flows, 0.0)


def test_pv_dv01_negative(flows, ref_date):
    assert pv_dv01(flows, 0.08, ref_date) < 0.0


def test_discount_rate_scenarios(flows, ref_date):
    scen = run_discount_rate_scenarios(flows, 0.08, ref_date)
    assert list(scen.columns) == ["shift_bp", "discount_rate", "pv_usd", "pnl_usd"]
    assert scen["shift_bp"].is_monotonic_increasing
    assert scen["pv_usd"].is_monotonic_decreasing

    base = scen.loc[scen["shift_bp"] == 0].iloc[0]
    assert base["pnl_usd"] == pytest.approx(0.0)
    assert base["pv_usd"] == pytest.approx(present_value(flows, 0.08, ref_date))
