from __future__ import annotations


class CashFlowEngineError(ValueError):
    """Base class for data/programming errors surfaced by the engine."""


class NoApplicableRatePeriod(CashFlowEngineError):
    def __init__(self, bond_id: str, date):
        self.bond_id = bond_id
        self.date = date
        super().__init__(f"No interest rate period found for date {date:%Y-%m-%d} for bond {bond_id}")


class UnknownInstrument(CashFlowEngineError, KeyError):
    def __init__(self, bond_id: str):
        self.bond_id = bond_id
        super().__init__(f'Bond with ID "{bond_id}" not found.')

    def __str__(self) -> str:
        return str(self.args[0])


class EmptySchedule(CashFlowEngineError):
    def __init__(self, bond_id: str):
        self.bond_id = bond_id
        super().__init__(f"{bond_id}: amortization schedule is empty.")
