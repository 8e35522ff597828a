"""Granularity helpers: one ledger date feeds three statistic cells."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from property_stats.domain.constants import ZERO, StatisticKey
from property_stats.domain.models import CellCoordinate, LedgerMonthlyTotal


def cell_coordinates(
    property_id: int,
    key: StatisticKey,
    on_date: date,
) -> tuple[CellCoordinate, CellCoordinate, CellCoordinate]:
    """Return the all-time, yearly and monthly cells touched by a date.

    The order is stable so concurrent writers lock rows in the same order.
    """
    return (
        CellCoordinate(property_id, key),
        CellCoordinate(property_id, key, on_date.year),
        CellCoordinate(property_id, key, on_date.year, on_date.month),
    )


def roll_up_monthly_totals(
    rows: Iterable[LedgerMonthlyTotal],
) -> dict[CellCoordinate, Decimal]:
    """Expand monthly ledger totals into monthly, yearly and all-time cells.

    Args:
        rows: Monthly totals, possibly spanning several properties and keys.

    Returns:
        dict[CellCoordinate, Decimal]: Cell values; properties never mix.
    """
    values: dict[CellCoordinate, Decimal] = defaultdict(lambda: ZERO)
    for row in rows:
        for coordinate in cell_coordinates(
            row.property_id,
            row.key,
            date(row.year, row.month, 1),
        ):
            values[coordinate] += row.total
    return dict(values)


__all__ = ["cell_coordinates", "roll_up_monthly_totals"]
