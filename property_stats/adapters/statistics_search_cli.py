"""CLI adapter to print statistic rows matching environment filters."""

import os

from property_stats.adapters._env import read_flag, read_int
from property_stats.domain.constants import StatisticKey
from property_stats.domain.exceptions import StatisticsStoreError
from property_stats.domain.models import StatisticsFilter
from property_stats.infrastructure.container import (
    build_query_statistics_use_case,
)
from property_stats.infrastructure.logging.logger import get_app_logger


def _parse_key(value: str | None, logger) -> StatisticKey | None:
    """Parse a statistic key name.

    Args:
        value: Key name such as ``income`` or ``rental_visits``.
        logger: Logger used for warnings.

    Returns:
        StatisticKey | None: Parsed key or None when unset or unknown.
    """
    if not value:
        return None
    try:
        return StatisticKey(value.strip().lower())
    except ValueError:
        logger.warning(
            f"Unknown statistic key '{value}'. Expected one of: "
            f"{', '.join(key.value for key in StatisticKey)}."
        )
        return None


def _format_period(year: int | None, month: int | None) -> str:
    if year is None:
        return "all-time"
    if month is None:
        return str(year)
    return f"{year}-{month:02d}"


def main() -> None:
    """Run a statistics search and print the matching rows."""
    logger = get_app_logger()
    try:
        statistics_filter = StatisticsFilter(
            property_id=read_int("STATS_SEARCH_PROPERTY_ID", logger),
            key=_parse_key(os.getenv("STATS_SEARCH_KEY"), logger),
            year=read_int("STATS_SEARCH_YEAR", logger),
            month=read_int("STATS_SEARCH_MONTH", logger),
            include_yearly=read_flag("STATS_SEARCH_INCLUDE_YEARLY"),
            include_monthly=read_flag("STATS_SEARCH_INCLUDE_MONTHLY"),
        )
    except ValueError as exc:
        logger.warning(f"Invalid search filter: {exc}")
        return

    use_case = build_query_statistics_use_case()
    try:
        rows = use_case.search(statistics_filter)
    except StatisticsStoreError as exc:
        logger.error(f"Statistics search failed: {exc}")
        return

    print(f"{len(rows)} statistic rows")
    for row in rows:
        print(
            f"property={row.property_id} key={row.key.value} "
            f"period={_format_period(row.year, row.month)} value={row.value}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
