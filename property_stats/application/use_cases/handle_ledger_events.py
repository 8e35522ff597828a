"""Use case translating ledger events into statistic deltas.

Only ACCEPTED transactions contribute. Malformed events are logged and
ignored; store failures are raised to the event source.
"""

from property_stats.application.use_cases.apply_delta import ApplyDeltaUseCase
from property_stats.domain.exceptions import MalformedEventError
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
from property_stats.domain.services import (
    is_accepted,
    negate_deltas,
    standalone_expense_deltas,
    standalone_income_deltas,
    transaction_deltas,
)
from property_stats.infrastructure.logging.logger import get_event_logger


class LedgerEventHandler:
    """Subscriber applying ledger events to the statistic cells."""

    def __init__(
        self,
        apply_delta: ApplyDeltaUseCase,
        rental_income_type_id: int | None = None,
        logger=None,
    ) -> None:
        """Initialize the handler.

        Args:
            apply_delta: Use case accumulating one delta into its cells.
            rental_income_type_id: Income category counted as a rental visit.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._apply_delta = apply_delta
        self._rental_income_type_id = rental_income_type_id
        self._logger = logger or get_event_logger()
        self._dispatch = {
            TransactionCreated: lambda e: self.on_transaction_created(
                e.transaction
            ),
            TransactionAccepted: lambda e: self.on_transaction_accepted(
                e.transaction
            ),
            TransactionDeleted: lambda e: self.on_transaction_deleted(
                e.transaction
            ),
            StandaloneIncomeCreated: lambda e: self.on_standalone_income_created(
                e.income
            ),
            StandaloneIncomeDeleted: lambda e: self.on_standalone_income_deleted(
                e.income
            ),
            StandaloneExpenseCreated: lambda e: (
                self.on_standalone_expense_created(e.expense)
            ),
            StandaloneExpenseDeleted: lambda e: (
                self.on_standalone_expense_deleted(e.expense)
            ),
        }

    def handle(self, event) -> bool:
        """Route an event to its handler.

        Returns:
            bool: True when deltas were applied.
        """
        handler = self._dispatch.get(type(event))
        if handler is None:
            self._logger.warning(
                f"Ignoring unsupported event {type(event).__name__}"
            )
            return False
        return handler(event)

    def on_transaction_created(self, transaction: LedgerTransaction) -> bool:
        """Apply the deltas of a newly created transaction."""
        return self._apply_transaction(transaction, negate=False)

    def on_transaction_accepted(self, transaction: LedgerTransaction) -> bool:
        """Apply the deltas of a pending transaction that was accepted."""
        return self._apply_transaction(transaction, negate=False)

    def on_transaction_deleted(self, transaction: LedgerTransaction) -> bool:
        """Revert the deltas of a deleted transaction."""
        return self._apply_transaction(transaction, negate=True)

    def on_standalone_income_created(self, income: StandaloneIncome) -> bool:
        return self._apply_standalone(
            income,
            StandaloneIncome,
            lambda: standalone_income_deltas(
                income, self._rental_income_type_id
            ),
            negate=False,
        )

    def on_standalone_income_deleted(self, income: StandaloneIncome) -> bool:
        return self._apply_standalone(
            income,
            StandaloneIncome,
            lambda: standalone_income_deltas(
                income, self._rental_income_type_id
            ),
            negate=True,
        )

    def on_standalone_expense_created(self, expense: StandaloneExpense) -> bool:
        return self._apply_standalone(
            expense,
            StandaloneExpense,
            lambda: standalone_expense_deltas(expense),
            negate=False,
        )

    def on_standalone_expense_deleted(self, expense: StandaloneExpense) -> bool:
        return self._apply_standalone(
            expense,
            StandaloneExpense,
            lambda: standalone_expense_deltas(expense),
            negate=True,
        )

    def _apply_transaction(
        self,
        transaction: LedgerTransaction,
        negate: bool,
    ) -> bool:
        try:
            _require_payload(transaction, LedgerTransaction)
            if not is_accepted(transaction):
                self._logger.debug(
                    f"Skipping transaction {transaction.id} with status "
                    f"{transaction.status}"
                )
                return False
            deltas = transaction_deltas(
                transaction,
                self._rental_income_type_id,
            )
        except MalformedEventError as exc:
            self._logger.warning(f"Ignoring transaction event: {exc}")
            return False
        if negate:
            deltas = negate_deltas(deltas)
        self._apply(transaction.property_id, deltas)
        self._logger.info(
            f"{'Reverted' if negate else 'Applied'} transaction "
            f"{transaction.id} on property {transaction.property_id}"
        )
        return True

    def _apply_standalone(
        self,
        record,
        record_type: type,
        build_deltas,
        negate: bool,
    ) -> bool:
        kind = "income" if record_type is StandaloneIncome else "expense"
        try:
            _require_payload(record, record_type)
            deltas = build_deltas()
        except MalformedEventError as exc:
            self._logger.warning(f"Ignoring standalone {kind} event: {exc}")
            return False
        if negate:
            deltas = negate_deltas(deltas)
        self._apply(record.property_id, deltas)
        self._logger.info(
            f"{'Reverted' if negate else 'Applied'} standalone {kind} "
            f"{record.id} on property {record.property_id}"
        )
        return True

    def _apply(self, property_id: int, deltas: list[StatisticDelta]) -> None:
        self._apply_delta.execute_many(property_id, deltas)


def _require_payload(record, record_type: type) -> None:
    if not isinstance(record, record_type):
        raise MalformedEventError(
            f"expected {record_type.__name__}, got {type(record).__name__}"
        )


__all__ = ["LedgerEventHandler"]
