"""Translate ledger facts into signed statistic deltas.

Sign conventions follow the ledger: incomes and deposits are positive cash,
expenses and withdrawals negative. Expense and withdraw cells store the
negated ledger amount so both hold positive magnitudes.
"""

from datetime import date
from decimal import Decimal

from property_stats.domain.constants import (
    StatisticKey,
    TransactionStatus,
    TransactionType,
)
from property_stats.domain.exceptions import MalformedEventError
from property_stats.domain.models import (
    LedgerTransaction,
    StandaloneExpense,
    StandaloneIncome,
    StatisticDelta,
)
from property_stats.utils.decimal_utils import quantize_amount

ONE = Decimal("1")

_TYPE_KEYS = {
    TransactionType.INCOME: StatisticKey.INCOME,
    TransactionType.EXPENSE: StatisticKey.EXPENSE,
    TransactionType.DEPOSIT: StatisticKey.DEPOSIT,
    TransactionType.WITHDRAW: StatisticKey.WITHDRAW,
}

_NEGATED_TYPES = (TransactionType.EXPENSE, TransactionType.WITHDRAW)


def parse_transaction_type(raw, transaction_id=None) -> TransactionType:
    """Return the TransactionType for a raw value or raise."""
    try:
        return TransactionType(_normalize_enum_value(raw))
    except ValueError as exc:
        raise MalformedEventError(
            f"unknown transaction type {raw!r}", transaction_id
        ) from exc


def parse_transaction_status(raw, transaction_id=None) -> TransactionStatus:
    """Return the TransactionStatus for a raw value or raise."""
    try:
        return TransactionStatus(_normalize_enum_value(raw))
    except ValueError as exc:
        raise MalformedEventError(
            f"unknown transaction status {raw!r}", transaction_id
        ) from exc


def is_accepted(transaction: LedgerTransaction) -> bool:
    """Return True when the transaction participates in aggregation."""
    status = parse_transaction_status(transaction.status, transaction.id)
    return status is TransactionStatus.ACCEPTED


def transaction_deltas(
    transaction: LedgerTransaction,
    rental_income_type_id: int | None = None,
) -> list[StatisticDelta]:
    """Return the deltas an accepted transaction contributes.

    Args:
        transaction: Ledger transaction; its status is not inspected here.
        rental_income_type_id: Income category counted as a rental booking.

    Returns:
        list[StatisticDelta]: Category delta, BALANCE delta and, for rental
        incomes, a RENTAL_VISITS delta of one.

    Raises:
        MalformedEventError: If a required field is missing or invalid.
    """
    _require_property(transaction.property_id, transaction.id)
    on_date = _require_date(transaction.accounting_date, transaction.id)
    tx_type = parse_transaction_type(transaction.type, transaction.id)
    amount = _require_amount(transaction.amount, transaction.id)

    category_amount = -amount if tx_type in _NEGATED_TYPES else amount
    deltas = [
        StatisticDelta(_TYPE_KEYS[tx_type], on_date, category_amount),
        StatisticDelta(StatisticKey.BALANCE, on_date, amount),
    ]
    if tx_type is TransactionType.INCOME and _is_rental(
        transaction.income_type_id, rental_income_type_id
    ):
        deltas.append(StatisticDelta(StatisticKey.RENTAL_VISITS, on_date, ONE))
    return deltas


def standalone_income_deltas(
    income: StandaloneIncome,
    rental_income_type_id: int | None = None,
) -> list[StatisticDelta]:
    """Return the deltas of an income recorded without a bank transaction."""
    _require_property(income.property_id, income.id)
    on_date = _require_date(income.accounting_date, income.id)
    amount = _require_amount(income.amount, income.id)
    deltas = [StatisticDelta(StatisticKey.INCOME, on_date, amount)]
    if _is_rental(income.income_type_id, rental_income_type_id):
        deltas.append(StatisticDelta(StatisticKey.RENTAL_VISITS, on_date, ONE))
    return deltas


def standalone_expense_deltas(expense: StandaloneExpense) -> list[StatisticDelta]:
    """Return the deltas of an expense recorded without a bank transaction.

    Expense rows carry positive magnitudes, unlike expense transactions.
    """
    _require_property(expense.property_id, expense.id)
    on_date = _require_date(expense.accounting_date, expense.id)
    amount = _require_amount(expense.amount, expense.id)
    return [StatisticDelta(StatisticKey.EXPENSE, on_date, amount)]


def negate_deltas(deltas: list[StatisticDelta]) -> list[StatisticDelta]:
    """Return the deltas that undo ``deltas``."""
    return [delta.negated() for delta in deltas]


def _is_rental(income_type_id, rental_income_type_id) -> bool:
    return (
        rental_income_type_id is not None
        and income_type_id is not None
        and income_type_id == rental_income_type_id
    )


def _normalize_enum_value(raw) -> str:
    if hasattr(raw, "value"):
        raw = raw.value
    if not isinstance(raw, str):
        raise ValueError(f"Not a string: {raw!r}")
    return raw.strip().lower()


def _require_property(property_id, record_id) -> int:
    if property_id is None or isinstance(property_id, bool):
        raise MalformedEventError("missing property id", record_id)
    if not isinstance(property_id, int):
        raise MalformedEventError(
            f"invalid property id {property_id!r}", record_id
        )
    return property_id


def _require_date(value, record_id) -> date:
    if not isinstance(value, date):
        raise MalformedEventError(
            f"invalid accounting date {value!r}", record_id
        )
    return value


def _require_amount(value, record_id) -> Decimal:
    if value is None:
        raise MalformedEventError("missing amount", record_id)
    try:
        return quantize_amount(value)
    except ValueError as exc:
        raise MalformedEventError(str(exc), record_id) from exc


__all__ = [
    "parse_transaction_type",
    "parse_transaction_status",
    "is_accepted",
    "transaction_deltas",
    "standalone_income_deltas",
    "standalone_expense_deltas",
    "negate_deltas",
]
