"""Ledger facts and events consumed by the statistics engine.

Event fields are loosely typed and validated when translated into deltas.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from property_stats.domain.constants import StatisticKey


@dataclass(frozen=True)
class LedgerTransaction:
    """Bank transaction as published by the ledger subsystem."""

    id: int | None
    property_id: int | None
    type: str | None
    status: str | None
    amount: Decimal | int | float | str | None
    accounting_date: date | None
    income_type_id: int | None = None


@dataclass(frozen=True)
class StandaloneIncome:
    """Income recorded without a bank transaction."""

    id: int | None
    property_id: int | None
    amount: Decimal | int | float | str | None
    accounting_date: date | None
    income_type_id: int | None = None


@dataclass(frozen=True)
class StandaloneExpense:
    """Expense recorded without a bank transaction."""

    id: int | None
    property_id: int | None
    amount: Decimal | int | float | str | None
    accounting_date: date | None


@dataclass(frozen=True)
class TransactionCreated:
    transaction: LedgerTransaction


@dataclass(frozen=True)
class TransactionAccepted:
    """A previously pending transaction switched to ACCEPTED."""

    transaction: LedgerTransaction


@dataclass(frozen=True)
class TransactionDeleted:
    transaction: LedgerTransaction


@dataclass(frozen=True)
class StandaloneIncomeCreated:
    income: StandaloneIncome


@dataclass(frozen=True)
class StandaloneIncomeDeleted:
    income: StandaloneIncome


@dataclass(frozen=True)
class StandaloneExpenseCreated:
    expense: StandaloneExpense


@dataclass(frozen=True)
class StandaloneExpenseDeleted:
    expense: StandaloneExpense


@dataclass(frozen=True)
class LedgerMonthlyTotal:
    """Accepted ledger facts of one metric summed for one month.

    Attributes:
        property_id: Property the facts belong to.
        key: Metric the facts contribute to.
        year: Calendar year of the accounting date.
        month: Month of the accounting date.
        count: Number of ledger rows summed.
        total: Signed contribution to the metric.
    """

    property_id: int
    key: StatisticKey
    year: int
    month: int
    count: int
    total: Decimal


__all__ = [
    "LedgerTransaction",
    "StandaloneIncome",
    "StandaloneExpense",
    "TransactionCreated",
    "TransactionAccepted",
    "TransactionDeleted",
    "StandaloneIncomeCreated",
    "StandaloneIncomeDeleted",
    "StandaloneExpenseCreated",
    "StandaloneExpenseDeleted",
    "LedgerMonthlyTotal",
]
