from __future__ import annotations

import logging
import pandas as pd
from typing import Iterable, List, Mapping, Optional

from .bonds import Bond
from .cashflows import CashFlowPayment, generate_cash_flows
from .data import bonds_by_id
from .schedule import COUPON_PAYMENT_DAY

logger = logging.getLogger(__name__)


def generate_all_cash_flows(
    amounts_by_bond_id: Mapping[str, float],
    start_date: Optional[pd.Timestamp] = None,
    end_date: Optional[pd.Timestamp] = None,
    bonds: Optional[Iterable[Bond]] = None,
    payment_day: int = COUPON_PAYMENT_DAY,
) -> List[CashFlowPayment]:
    """
    Merged cash flows for every bond with a positive requested amount.

    Bonds are visited in catalog order; the result is sorted by date (stable,
    so same-day payments keep catalog order). Ids that are not in the catalog
    are skipped with a warning rather than failing the batch.
    """
    catalog = bonds_by_id(bonds)

    for bond_id in amounts_by_bond_id:
        if bond_id not in catalog:
            logger.warning('Bond with ID "%s" not found; skipped.', bond_id)

    flows: List[CashFlowPayment] = []
    for bond_id, bond in catalog.items():
        amount = amounts_by_bond_id.get(bond_id) or 0.0
        if amount <= 0:
            continue
        if amount > bond.max_amount:
            logger.warning("%s: requested %.2f exceeds max issuable %.2f", bond_id, amount, bond.max_amount)
        flows.extend(generate_cash_flows(bond, amount, start_date, end_date, payment_day))

    return sorted(flows, key=lambda cf: cf.date)
