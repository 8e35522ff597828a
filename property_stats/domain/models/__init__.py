"""Domain models package."""

from .ledger import (
    LedgerMonthlyTotal,
    LedgerTransaction,
    StandaloneExpense,
    StandaloneExpenseCreated,
    StandaloneExpenseDeleted,
    StandaloneIncome,
    StandaloneIncomeCreated,
    StandaloneIncomeDeleted,
    TransactionAccepted,
    TransactionCreated,
    TransactionDeleted,
)
from .statistics import (
    CellCoordinate,
    KeySummary,
    RecalculationSummary,
    StatisticDelta,
    StatisticRow,
    StatisticsFilter,
)

__all__ = [
    "CellCoordinate",
    "KeySummary",
    "RecalculationSummary",
    "StatisticDelta",
    "StatisticRow",
    "StatisticsFilter",
    "LedgerMonthlyTotal",
    "LedgerTransaction",
    "StandaloneExpense",
    "StandaloneExpenseCreated",
    "StandaloneExpenseDeleted",
    "StandaloneIncome",
    "StandaloneIncomeCreated",
    "StandaloneIncomeDeleted",
    "TransactionAccepted",
    "TransactionCreated",
    "TransactionDeleted",
]
