"""Use case for reading statistic cells.

No authorization happens here: callers restrict property ids to the ones the
requesting principal may see.
"""

from decimal import Decimal

from property_stats.application.ports.statistics_store import (
    StatisticsStorePort,
)
from property_stats.domain.constants import ZERO, StatisticKey
from property_stats.domain.models import (
    CellCoordinate,
    StatisticRow,
    StatisticsFilter,
)
from property_stats.infrastructure.logging.logger import get_app_logger
from property_stats.utils.decimal_utils import quantize_amount


class QueryStatisticsUseCase:
    """Read cell values and search statistic rows."""

    def __init__(self, store: StatisticsStorePort, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Port providing cell reads.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def get_value(
        self,
        property_id: int,
        key: StatisticKey,
        year: int | None = None,
        month: int | None = None,
    ) -> Decimal:
        """Return a cell value, or zero when the cell does not exist.

        Args:
            property_id: Property owning the cell.
            key: Metric to read.
            year: Year of a yearly or monthly cell; None for all-time.
            month: Month of a monthly cell.

        Returns:
            Decimal: Cell value rounded to cents.
        """
        coordinate = CellCoordinate(property_id, StatisticKey(key), year, month)
        value = self._store.fetch_value(coordinate)
        if value is None:
            return ZERO
        return quantize_amount(value)

    def search(self, statistics_filter: StatisticsFilter) -> list[StatisticRow]:
        """Return rows matching the filter, ordered by coordinate.

        Args:
            statistics_filter: Search criteria.

        Returns:
            list[StatisticRow]: Matching rows; empty when nothing matches.
        """
        rows = self._store.search(statistics_filter)
        self._logger.debug(
            f"Statistics search returned {len(rows)} rows for {statistics_filter}"
        )
        return rows


__all__ = ["QueryStatisticsUseCase"]
