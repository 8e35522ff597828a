"""Tests for the LedgerEventHandler."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from property_stats.application.use_cases.handle_ledger_events import (
    LedgerEventHandler,
)
from property_stats.domain.constants import StatisticKey
from property_stats.domain.exceptions import StatisticsStoreUnavailableError
from property_stats.domain.models import (
    LedgerTransaction,
    StandaloneExpense,
    StandaloneExpenseCreated,
    StandaloneExpenseDeleted,
    StandaloneIncome,
    StandaloneIncomeCreated,
    StandaloneIncomeDeleted,
    StatisticDelta,
    TransactionAccepted,
    TransactionCreated,
    TransactionDeleted,
)

ON = date(2023, 2, 1)
RENTAL = 11


def _tx(**overrides) -> LedgerTransaction:
    values = {
        "id": 1,
        "property_id": 5,
        "type": "income",
        "status": "accepted",
        "amount": Decimal("249.00"),
        "accounting_date": ON,
        "income_type_id": None,
    }
    values.update(overrides)
    return LedgerTransaction(**values)


def _handler() -> tuple[LedgerEventHandler, MagicMock, MagicMock]:
    apply_delta = MagicMock()
    logger = MagicMock()
    handler = LedgerEventHandler(
        apply_delta,
        rental_income_type_id=RENTAL,
        logger=logger,
    )
    return handler, apply_delta, logger


def test_created_income_applies_income_and_balance_together() -> None:
    """Every delta of one event goes to the store in a single batch."""
    handler, apply_delta, _ = _handler()

    assert handler.handle(TransactionCreated(_tx())) is True

    apply_delta.execute_many.assert_called_once_with(
        5,
        [
            StatisticDelta(StatisticKey.INCOME, ON, Decimal("249.00")),
            StatisticDelta(StatisticKey.BALANCE, ON, Decimal("249.00")),
        ],
    )
    apply_delta.execute.assert_not_called()


def test_created_rental_income_counts_a_visit() -> None:
    handler, apply_delta, _ = _handler()

    handler.on_transaction_created(_tx(income_type_id=RENTAL))

    _, deltas = apply_delta.execute_many.call_args.args
    assert StatisticDelta(StatisticKey.RENTAL_VISITS, ON, Decimal("1")) in (
        deltas
    )


def test_deleted_transaction_applies_negated_deltas() -> None:
    handler, apply_delta, _ = _handler()

    handler.handle(TransactionDeleted(_tx(type="withdraw", amount="-80")))

    apply_delta.execute_many.assert_called_once_with(
        5,
        [
            StatisticDelta(StatisticKey.WITHDRAW, ON, Decimal("-80.00")),
            StatisticDelta(StatisticKey.BALANCE, ON, Decimal("80.00")),
        ],
    )


def test_accepted_event_behaves_like_creation() -> None:
    handler, apply_delta, _ = _handler()

    handler.handle(TransactionAccepted(_tx(type="deposit", amount="20")))

    apply_delta.execute_many.assert_called_once_with(
        5,
        [
            StatisticDelta(StatisticKey.DEPOSIT, ON, Decimal("20.00")),
            StatisticDelta(StatisticKey.BALANCE, ON, Decimal("20.00")),
        ],
    )


@pytest.mark.parametrize(
    "event_type",
    [TransactionCreated, TransactionDeleted],
)
def test_pending_transactions_never_write(event_type) -> None:
    handler, apply_delta, _ = _handler()

    assert handler.handle(event_type(_tx(status="pending"))) is False

    apply_delta.execute_many.assert_not_called()


@pytest.mark.parametrize(
    "overrides",
    [
        {"property_id": None},
        {"accounting_date": None},
        {"type": "loan"},
        {"status": "unknown"},
        {"amount": "abc"},
    ],
)
def test_malformed_events_are_logged_and_ignored(overrides) -> None:
    handler, apply_delta, logger = _handler()

    assert handler.on_transaction_created(_tx(**overrides)) is False

    apply_delta.execute_many.assert_not_called()
    logger.warning.assert_called_once()


@pytest.mark.parametrize(
    "event",
    [
        TransactionCreated(None),
        TransactionAccepted(None),
        TransactionDeleted(None),
        StandaloneIncomeCreated(None),
        StandaloneIncomeDeleted(None),
        StandaloneExpenseCreated(None),
        StandaloneExpenseDeleted(None),
        StandaloneIncomeCreated(_tx()),
    ],
)
def test_events_without_a_usable_payload_are_ignored(event) -> None:
    handler, apply_delta, logger = _handler()

    assert handler.handle(event) is False

    apply_delta.execute_many.assert_not_called()
    logger.warning.assert_called_once()


def test_store_failures_propagate() -> None:
    """A delta is never silently dropped when the store fails."""
    handler, apply_delta, _ = _handler()
    apply_delta.execute_many.side_effect = StatisticsStoreUnavailableError(
        "accumulate",
        "connection refused",
    )

    with pytest.raises(StatisticsStoreUnavailableError):
        handler.on_transaction_created(_tx())


def test_standalone_income_updates_income_and_visits_only() -> None:
    handler, apply_delta, _ = _handler()
    income = StandaloneIncome(
        id=3,
        property_id=5,
        amount="120",
        accounting_date=ON,
        income_type_id=RENTAL,
    )

    handler.handle(StandaloneIncomeCreated(income))

    apply_delta.execute_many.assert_called_once_with(
        5,
        [
            StatisticDelta(StatisticKey.INCOME, ON, Decimal("120.00")),
            StatisticDelta(StatisticKey.RENTAL_VISITS, ON, Decimal("1")),
        ],
    )


def test_standalone_expense_create_and_delete() -> None:
    handler, apply_delta, _ = _handler()
    expense = StandaloneExpense(
        id=4,
        property_id=5,
        amount="30",
        accounting_date=ON,
    )

    handler.handle(StandaloneExpenseCreated(expense))
    handler.handle(StandaloneExpenseDeleted(expense))

    batches = [c.args for c in apply_delta.execute_many.call_args_list]
    assert batches == [
        (5, [StatisticDelta(StatisticKey.EXPENSE, ON, Decimal("30.00"))]),
        (5, [StatisticDelta(StatisticKey.EXPENSE, ON, Decimal("-30.00"))]),
    ]


def test_malformed_standalone_expense_is_ignored() -> None:
    handler, apply_delta, logger = _handler()
    expense = StandaloneExpense(
        id=4,
        property_id=None,
        amount="30",
        accounting_date=ON,
    )

    assert handler.on_standalone_expense_created(expense) is False
    apply_delta.execute_many.assert_not_called()
    logger.warning.assert_called_once()


def test_unsupported_events_are_ignored() -> None:
    handler, apply_delta, logger = _handler()

    assert handler.handle(object()) is False

    apply_delta.execute_many.assert_not_called()
    logger.warning.assert_called_once()
