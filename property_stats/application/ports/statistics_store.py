"""Port for the persisted statistic cell store."""

from collections.abc import Callable, Collection, Sequence
from decimal import Decimal
from typing import Protocol

from property_stats.domain.constants import StatisticKey
from property_stats.domain.models import (
    CellCoordinate,
    StatisticRow,
    StatisticsFilter,
)


class StatisticsStorePort(Protocol):
    """Port exposing atomic cell mutations and reads.

    Implementations own transactions, locking and retries; callers never
    read a value to write it back.
    """

    def prepare_store(self) -> None:
        """Ensure the cell table exists."""

    def accumulate(
        self,
        coordinates: Sequence[CellCoordinate],
        delta: Decimal,
    ) -> None:
        """Add ``delta`` to every cell in one transaction, creating cells."""

    def accumulate_many(
        self,
        changes: Sequence[tuple[Sequence[CellCoordinate], Decimal]],
    ) -> None:
        """Apply every ``(coordinates, delta)`` pair in one transaction.

        Either all pairs are committed or none is.
        """

    def rebuild_property(
        self,
        property_id: int,
        keys: Collection[StatisticKey],
        compute: Callable[[], dict[CellCoordinate, Decimal]],
    ) -> int:
        """Replace the property's cells of ``keys`` with computed values.

        ``compute`` runs while the property is locked against deltas. Cells of
        ``keys`` missing from its result are reset to zero. Returns the number
        of cells written.
        """

    def fetch_value(self, coordinate: CellCoordinate) -> Decimal | None:
        """Return the cell value, or None if the cell was never created."""

    def search(self, statistics_filter: StatisticsFilter) -> list[StatisticRow]:
        """Return ordered rows matching the filter."""

    def fetch_property_ids(self) -> list[int]:
        """Return properties owning at least one cell."""


__all__ = ["StatisticsStorePort"]
