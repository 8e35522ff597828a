"""Domain constants for property statistics."""

from decimal import Decimal
from enum import Enum


class StatisticKey(str, Enum):
    """Metric identity of a statistic cell."""

    BALANCE = "balance"
    INCOME = "income"
    EXPENSE = "expense"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    RENTAL_VISITS = "rental_visits"


class TransactionType(str, Enum):
    """Ledger transaction categories."""

    INCOME = "income"
    EXPENSE = "expense"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class TransactionStatus(str, Enum):
    """Ledger entry states; only ACCEPTED entries are aggregated."""

    PENDING = "pending"
    ACCEPTED = "accepted"


# Keys rebuilt from the ledger. BALANCE is maintained by deltas only.
RECALCULABLE_KEYS = (
    StatisticKey.INCOME,
    StatisticKey.EXPENSE,
    StatisticKey.DEPOSIT,
    StatisticKey.WITHDRAW,
    StatisticKey.RENTAL_VISITS,
)

ZERO = Decimal("0.00")
AMOUNT_QUANTUM = Decimal("0.01")


__all__ = [
    "StatisticKey",
    "TransactionType",
    "TransactionStatus",
    "RECALCULABLE_KEYS",
    "ZERO",
    "AMOUNT_QUANTUM",
]
