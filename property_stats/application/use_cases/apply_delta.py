"""Use case adding signed deltas to the three granularities of a metric."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from property_stats.application.ports.statistics_store import (
    StatisticsStorePort,
)
from property_stats.domain.constants import StatisticKey
from property_stats.domain.models import StatisticDelta
from property_stats.domain.services import cell_coordinates
from property_stats.infrastructure.logging.logger import get_app_logger
from property_stats.utils.decimal_utils import quantize_amount


class ApplyDeltaUseCase:
    """Add a delta to the all-time, yearly and monthly cells of a key.

    Each cell is accumulated with an atomic insert-or-add in the store, so
    concurrent callers never lose updates or create duplicate cells. Amounts
    are rounded half-up to cents once, before they reach the store.
    """

    def __init__(self, store: StatisticsStorePort, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Port providing atomic cell accumulation.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        property_id: int,
        key: StatisticKey,
        on_date: date,
        delta: Decimal,
    ) -> None:
        """Apply ``delta`` to the cells of ``key`` for ``on_date``.

        Args:
            property_id: Property owning the cells.
            key: Metric to adjust.
            on_date: Ledger date selecting the yearly and monthly cells.
            delta: Signed adjustment.

        Raises:
            StatisticsStoreContentionError: If conflicts outlast the retries.
            StatisticsStoreUnavailableError: If the store cannot be reached.
        """
        self.execute_many(
            property_id,
            [StatisticDelta(StatisticKey(key), on_date, delta)],
        )

    def execute_many(
        self,
        property_id: int,
        deltas: Sequence[StatisticDelta],
    ) -> None:
        """Apply several deltas of one property in a single transaction.

        Args:
            property_id: Property owning the cells.
            deltas: Deltas of one ledger event.
        """
        changes = []
        for delta in deltas:
            key = StatisticKey(delta.key)
            changes.append(
                (
                    cell_coordinates(property_id, key, delta.on_date),
                    quantize_amount(delta.amount),
                )
            )
        if not changes:
            return
        self._store.accumulate_many(changes)
        self._logger.debug(
            f"Applied {len(changes)} deltas to property {property_id}: "
            + ", ".join(
                f"{StatisticKey(delta.key).value}={amount} "
                f"({delta.on_date:%Y-%m})"
                for delta, (_, amount) in zip(deltas, changes)
            )
        )


__all__ = ["ApplyDeltaUseCase"]
