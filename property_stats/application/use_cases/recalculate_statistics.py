"""Use case rebuilding statistic cells from the canonical ledger.

A rebuild replaces the value of every cell the engine derives from the
ledger. BALANCE cells are maintained by ledger events alone and are never
written here.
"""

from collections.abc import Iterable
from decimal import Decimal

from property_stats.application.ports.ledger_source import LedgerSourcePort
from property_stats.application.ports.statistics_store import (
    StatisticsStorePort,
)
from property_stats.domain.constants import RECALCULABLE_KEYS, ZERO
from property_stats.domain.models import (
    CellCoordinate,
    KeySummary,
    LedgerMonthlyTotal,
    RecalculationSummary,
)
from property_stats.domain.services import roll_up_monthly_totals
from property_stats.infrastructure.logging.logger import get_app_logger


class RecalculateStatisticsUseCase:
    """Rebuild INCOME, EXPENSE, DEPOSIT, WITHDRAW and RENTAL_VISITS cells."""

    def __init__(
        self,
        store: StatisticsStorePort,
        ledger: LedgerSourcePort,
        rental_income_type_id: int | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Port replacing cell values under a property lock.
            ledger: Port reading accepted ledger facts.
            rental_income_type_id: Income category counted as a rental visit.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._ledger = ledger
        self._rental_income_type_id = rental_income_type_id
        self._logger = logger or get_app_logger()

    def execute(self, property_id: int | None = None) -> RecalculationSummary:
        """Rebuild one property, or every known property when omitted.

        Args:
            property_id: Property to rebuild; None rebuilds all of them.

        Returns:
            RecalculationSummary: Contributing row counts and all-time totals.
        """
        if property_id is not None:
            return self.execute_for_properties([property_id])
        property_ids = sorted(
            set(self._ledger.fetch_property_ids())
            | set(self._store.fetch_property_ids())
        )
        self._logger.info(
            f"Recalculating statistics for all {len(property_ids)} properties"
        )
        return self.execute_for_properties(property_ids)

    def execute_for_properties(
        self,
        property_ids: Iterable[int],
    ) -> RecalculationSummary:
        """Rebuild each listed property in its own locked transaction.

        Args:
            property_ids: Properties to rebuild; duplicates are ignored.

        Returns:
            RecalculationSummary: Key-wise sum over the rebuilt properties.
        """
        summary = RecalculationSummary()
        for property_id in sorted(set(property_ids)):
            summary = summary.merge(self._rebuild_property(property_id))
        self._logger.info(
            "Recalculation finished: "
            + ", ".join(
                f"{key.value}={summary[key].total} ({summary[key].count} rows)"
                for key in RECALCULABLE_KEYS
            )
        )
        return summary

    def _rebuild_property(self, property_id: int) -> RecalculationSummary:
        fetched: list[LedgerMonthlyTotal] = []

        def compute() -> dict[CellCoordinate, Decimal]:
            rows = self._ledger.fetch_monthly_totals(
                property_id,
                self._rental_income_type_id,
            )
            foreign = [row for row in rows if row.property_id != property_id]
            if foreign:
                raise ValueError(
                    f"Ledger returned rows of other properties while "
                    f"rebuilding property {property_id}"
                )
            fetched[:] = rows
            return roll_up_monthly_totals(rows)

        written = self._store.rebuild_property(
            property_id,
            RECALCULABLE_KEYS,
            compute,
        )
        self._logger.info(
            f"Rebuilt {written} cells of property {property_id} "
            f"from {sum(row.count for row in fetched)} ledger rows"
        )
        return _summarize(fetched)


def _summarize(rows: list[LedgerMonthlyTotal]) -> RecalculationSummary:
    counts = {key: 0 for key in RECALCULABLE_KEYS}
    totals = {key: ZERO for key in RECALCULABLE_KEYS}
    for row in rows:
        counts[row.key] += row.count
        totals[row.key] += row.total
    return RecalculationSummary(
        keys={
            key: KeySummary(count=counts[key], total=totals[key])
            for key in RECALCULABLE_KEYS
        }
    )


__all__ = ["RecalculateStatisticsUseCase"]
