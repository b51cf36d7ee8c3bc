"""
Step-Up Bond Cash Flow Engine

Modules:
- bonds: bond/rate/amortization objects + rate resolver + principal tracker + QC
- schedule: coupon + amortization payment date scheduler
- cashflows: single-bond cash flow generator + tabular view
- portfolio: multi-bond cash flow aggregation
- aggregation: month/quarter/half-year/year bucketing per currency
- valuation: present value (USD) + implied discount rate
- scenarios: discount-rate scenarios + PV01
- data: reference data for the Argentine step-up globals
- config: engine settings (YAML)
- cli: command-line front end
- utils: day normalisation + day count + month walk helpers

Reference data is passed explicitly; `data.BONDS` is only the default catalog.
"""
