"""Domain models for statistic cells and their summaries."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from property_stats.domain.constants import RECALCULABLE_KEYS, ZERO, StatisticKey


@dataclass(frozen=True)
class CellCoordinate:
    """Unique address of a statistic cell.

    Attributes:
        property_id: Owning property.
        key: Metric identity.
        year: Calendar year, or None for the all-time cell.
        month: Month 1-12, or None for the whole-year/all-time cell.
    """

    property_id: int
    key: StatisticKey
    year: int | None = None
    month: int | None = None

    def __post_init__(self) -> None:
        if self.month is not None and self.year is None:
            raise ValueError("A monthly cell requires a year")
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")


@dataclass(frozen=True)
class StatisticRow:
    """Persisted statistic cell as returned by searches."""

    property_id: int
    key: StatisticKey
    year: int | None
    month: int | None
    value: Decimal

    @property
    def coordinate(self) -> CellCoordinate:
        """Return the cell coordinate of the row."""
        return CellCoordinate(
            property_id=self.property_id,
            key=self.key,
            year=self.year,
            month=self.month,
        )


@dataclass(frozen=True)
class StatisticDelta:
    """Signed adjustment for one metric on one ledger date."""

    key: StatisticKey
    on_date: date
    amount: Decimal

    def negated(self) -> "StatisticDelta":
        """Return the delta that undoes this one."""
        return StatisticDelta(
            key=self.key,
            on_date=self.on_date,
            amount=-self.amount,
        )


@dataclass(frozen=True)
class StatisticsFilter:
    """Search criteria for statistic rows.

    Attributes:
        property_id: Restrict to a single property.
        key: Restrict to a single metric.
        year: Select yearly rows of this year (and monthly rows with
            ``include_monthly``); None selects all-time rows.
        month: Select one monthly row of ``year``.
        include_yearly: With no year, also return every yearly row.
        include_monthly: With a year, also return that year's monthly rows.
        property_ids: Caller-approved properties; None means unrestricted.
    """

    property_id: int | None = None
    key: StatisticKey | None = None
    year: int | None = None
    month: int | None = None
    include_yearly: bool = False
    include_monthly: bool = False
    property_ids: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if self.month is not None and self.year is None:
            raise ValueError("Filtering by month requires a year")


@dataclass(frozen=True)
class KeySummary:
    """Outcome of rebuilding one metric.

    Attributes:
        count: Number of contributing ledger rows.
        total: Resulting all-time total.
    """

    count: int = 0
    total: Decimal = ZERO


@dataclass(frozen=True)
class RecalculationSummary:
    """Per-key outcome of a recalculation run."""

    keys: dict[StatisticKey, KeySummary] = field(
        default_factory=lambda: {key: KeySummary() for key in RECALCULABLE_KEYS}
    )

    def __getitem__(self, key: StatisticKey) -> KeySummary:
        return self.keys.get(key, KeySummary())

    @property
    def income(self) -> KeySummary:
        return self[StatisticKey.INCOME]

    @property
    def expense(self) -> KeySummary:
        return self[StatisticKey.EXPENSE]

    @property
    def deposit(self) -> KeySummary:
        return self[StatisticKey.DEPOSIT]

    @property
    def withdraw(self) -> KeySummary:
        return self[StatisticKey.WITHDRAW]

    @property
    def rental_visits(self) -> KeySummary:
        return self[StatisticKey.RENTAL_VISITS]

    def merge(self, other: "RecalculationSummary") -> "RecalculationSummary":
        """Return the key-wise sum of two summaries."""
        merged = {}
        for key in RECALCULABLE_KEYS:
            left = self[key]
            right = other[key]
            merged[key] = KeySummary(
                count=left.count + right.count,
                total=left.total + right.total,
            )
        return RecalculationSummary(keys=merged)

    def as_dict(self) -> dict[str, dict[str, object]]:
        """Return a JSON-friendly mapping keyed by metric name."""
        return {
            key.value: {"count": self[key].count, "total": self[key].total}
            for key in RECALCULABLE_KEYS
        }


__all__ = [
    "CellCoordinate",
    "StatisticRow",
    "StatisticDelta",
    "StatisticsFilter",
    "KeySummary",
    "RecalculationSummary",
]
