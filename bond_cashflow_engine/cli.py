"""
Command-line front end for the cash-flow engine.

Usage:
  bond-cashflows list
  bond-cashflows cashflows USD-STEP-UP-2030 1000 2023 2030
  bond-cashflows aggregate year
  bond-cashflows pv 0.08
  bond-cashflows yield 2500
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from .aggregation import PERIOD_TYPES, aggregate_cash_flows, aggregate_totals, aggregated_frame
from .cashflows import cash_flow_table, generate_cash_flows
from .config import EngineSettings, load_settings
from .data import get_all_bonds, get_bond_by_id
from .portfolio import generate_all_cash_flows
from .scenarios import pv_dv01, run_discount_rate_scenarios
from .utils import year_window
from .valuation import implied_discount_rate, present_value, present_value_by_bond

logger = logging.getLogger(__name__)


def _money(x: float) -> str:
    return f"{x:,.2f}"


def cmd_list(args, settings: EngineSettings) -> int:
    rows = [
        (b.bond_id, b.currency, b.issue_date.date(), b.maturity.date(), b.max_amount, b.name)
        for b in get_all_bonds()
    ]
    table = pd.DataFrame(rows, columns=["bond_id", "currency", "issue", "maturity", "max_amount_mn", "name"])
    print(table.to_string(index=False, formatters={"max_amount_mn": _money}))
    return 0


def cmd_cashflows(args, settings: EngineSettings) -> int:
    bond = get_bond_by_id(args.bond_id)
    start, end = year_window(args.start_year, args.end_year)
    flows = generate_cash_flows(
        bond,
        args.amount,
        start,
        end if end is not None else settings.default_end_date,
        settings.coupon_payment_day,
    )

    table = cash_flow_table(flows)
    print(f"Cash Flows for {bond.name} ({bond.currency} {_money(args.amount)} million):")
    if table.empty:
        print("(no payments in window)")
        return 0

    table["date"] = table["date"].dt.strftime("%Y-%m-%d")
    total = pd.DataFrame(
        [("TOTAL", "", bond.currency, table["principal"].sum(), table["interest"].sum(), table["total"].sum())],
        columns=table.columns,
    )
    table = pd.concat([table, total], ignore_index=True)
    money_cols = {c: _money for c in ("principal", "interest", "total")}
    print(table.drop(columns=["bond_id"]).to_string(index=False, formatters=money_cols))
    return 0


def _demo_flows(settings: EngineSettings):
    return generate_all_cash_flows(
        settings.demo_holdings,
        start_date=settings.valuation_date,
        end_date=settings.default_end_date,
        payment_day=settings.coupon_payment_day,
    )


def _valuation_kwargs(settings: EngineSettings) -> dict:
    return {"reference_date": settings.valuation_date, "usd_to_eur_rate": settings.usd_to_eur_rate}


def cmd_aggregate(args, settings: EngineSettings) -> int:
    aggregated = aggregate_cash_flows(_demo_flows(settings), args.period_type)
    frame = aggregated_frame(aggregated + [aggregate_totals(aggregated)])

    print(f"Aggregated Cash Flows by {args.period_type}:")
    money_cols = {c: _money for c in frame.columns if c != "period"}
    print(frame.to_string(index=False, formatters=money_cols))
    return 0


def cmd_pv(args, settings: EngineSettings) -> int:
    rate = settings.discount_rate if args.discount_rate is None else args.discount_rate
    flows = _demo_flows(settings)

    pv = present_value(flows, rate, **_valuation_kwargs(settings))
    print(f"Present Value of All Cash Flows (Discount Rate: {rate * 100:.2f}%):")
    print(f"Present Value: USD {_money(pv)} million")
    print(f"PV01 (+1bp):   USD {_money(pv_dv01(flows, rate, **_valuation_kwargs(settings)))} million")
    print()
    by_bond = present_value_by_bond(flows, rate, **_valuation_kwargs(settings))
    print(by_bond.to_string(index=False, formatters={"pv_usd": _money}))
    print()
    scen = run_discount_rate_scenarios(flows, rate, **_valuation_kwargs(settings))
    print(scen.to_string(index=False, formatters={"pv_usd": _money, "pnl_usd": _money}))
    return 0


def cmd_yield(args, settings: EngineSettings) -> int:
    flows = _demo_flows(settings)
    r = implied_discount_rate(flows, args.target_pv, **_valuation_kwargs(settings))
    print(f"Implied discount rate for PV USD {_money(args.target_pv)} million: {r * 100:.4f}%")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bond-cashflows", description="Argentine step-up bonds cash flow calculator")
    p.add_argument("--config", default=None, help="YAML settings file")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all available bonds").set_defaults(func=cmd_list)

    cf = sub.add_parser("cashflows", help="Cash flows for a specific bond")
    cf.add_argument("bond_id")
    cf.add_argument("amount", type=float, help="Face amount in millions")
    cf.add_argument("start_year", type=int, nargs="?", default=None)
    cf.add_argument("end_year", type=int, nargs="?", default=None)
    cf.set_defaults(func=cmd_cashflows)

    agg = sub.add_parser("aggregate", help="Aggregate demo holdings by period")
    agg.add_argument("period_type", choices=PERIOD_TYPES)
    agg.set_defaults(func=cmd_aggregate)

    pv = sub.add_parser("pv", help="Present value of demo holdings")
    pv.add_argument("discount_rate", type=float, nargs="?", default=None, help="e.g. 0.08 for 8%%")
    pv.set_defaults(func=cmd_pv)

    y = sub.add_parser("yield", help="Discount rate that reproduces a target PV")
    y.add_argument("target_pv", type=float, help="Target PV in USD millions")
    y.set_defaults(func=cmd_yield)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config) if args.config else EngineSettings()

    try:
        level = (args.log_level or settings.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {level}")
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

        return args.func(args, settings)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
