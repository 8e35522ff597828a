"""SQLAlchemy-backed statistic cell store.

Cells live in one ``property_statistics`` table keyed by
``(property_id, key, year, month)``. All-time and whole-year cells store
``0`` in the year/month columns so the primary key enforces uniqueness on
every backend; the adapter maps them back to ``None``. Values are kept as
integer cents so accumulation is exact on SQLite and PostgreSQL alike.
"""

from collections.abc import Callable, Collection, Sequence
from decimal import Decimal

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)

from property_stats.application.ports.database import DatabaseEnginePort
from property_stats.application.ports.statistics_store import (
    StatisticsStorePort,
)
from property_stats.domain.constants import StatisticKey
from property_stats.domain.exceptions import (
    StatisticsStoreContentionError,
    StatisticsStoreError,
    StatisticsStoreUnavailableError,
)
from property_stats.domain.models import (
    CellCoordinate,
    StatisticRow,
    StatisticsFilter,
)
from property_stats.infrastructure.logging.logger import get_app_logger
from property_stats.infrastructure.retry import RetryPolicy, retry_call
from property_stats.utils.decimal_utils import from_cents, to_cents


NO_PERIOD = 0
STATISTICS_LOCK_NAMESPACE = 21332
TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
TRANSIENT_MESSAGES = ("database is locked", "database table is locked")

CREATE_PROPERTY_STATISTICS_SQL = """
CREATE TABLE IF NOT EXISTS property_statistics (
    property_id INTEGER NOT NULL,
    key VARCHAR(32) NOT NULL,
    year INTEGER NOT NULL DEFAULT 0,
    month INTEGER NOT NULL DEFAULT 0,
    value_cents BIGINT NOT NULL DEFAULT 0,
    PRIMARY KEY (property_id, key, year, month),
    CHECK (month BETWEEN 0 AND 12),
    CHECK (year > 0 OR month = 0)
)
"""

ACCUMULATE_SQL = text(
    """
    INSERT INTO property_statistics (
        property_id, key, year, month, value_cents
    )
    VALUES (:property_id, :key, :year, :month, :value_cents)
    ON CONFLICT (property_id, key, year, month)
    DO UPDATE SET
        value_cents = property_statistics.value_cents + excluded.value_cents
    """
)

REPLACE_CELLS_SQL = text(
    """
    INSERT INTO property_statistics (
        property_id, key, year, month, value_cents
    )
    VALUES (:property_id, :key, :year, :month, :value_cents)
    ON CONFLICT (property_id, key, year, month)
    DO UPDATE SET value_cents = excluded.value_cents
    """
)

ZERO_CELLS_SQL = text(
    """
    UPDATE property_statistics
    SET value_cents = 0
    WHERE property_id = :property_id
      AND key IN :keys
    """
).bindparams(bindparam("keys", expanding=True))

SELECT_VALUE_SQL = text(
    """
    SELECT value_cents
    FROM property_statistics
    WHERE property_id = :property_id
      AND key = :key
      AND year = :year
      AND month = :month
    """
)

SELECT_PROPERTY_IDS_SQL = text(
    """
    SELECT DISTINCT property_id
    FROM property_statistics
    ORDER BY property_id
    """
)

SHARED_LOCK_SQL = text(
    "SELECT pg_advisory_xact_lock_shared("
    "CAST(:namespace AS INTEGER), CAST(:property_id AS INTEGER))"
)

EXCLUSIVE_LOCK_SQL = text(
    "SELECT pg_advisory_xact_lock("
    "CAST(:namespace AS INTEGER), CAST(:property_id AS INTEGER))"
)


def is_transient_error(exc: BaseException) -> bool:
    """Return True when a database error is worth retrying.

    Args:
        exc: Exception raised while running a store operation.

    Returns:
        bool: True for serialization failures, deadlocks, lock timeouts and
        SQLite busy errors.
    """
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in TRANSIENT_SQLSTATES:
        return True
    message = str(orig).lower()
    return any(fragment in message for fragment in TRANSIENT_MESSAGES)


def _coordinate_params(coordinate: CellCoordinate) -> dict[str, object]:
    return {
        "property_id": coordinate.property_id,
        "key": StatisticKey(coordinate.key).value,
        "year": coordinate.year if coordinate.year is not None else NO_PERIOD,
        "month": coordinate.month if coordinate.month is not None else NO_PERIOD,
    }


def _period(value) -> int | None:
    value = int(value)
    return None if value == NO_PERIOD else value


def build_search_query(statistics_filter: StatisticsFilter):
    """Build the search statement and parameters for a filter.

    Args:
        statistics_filter: Search criteria.

    Returns:
        tuple: ``(TextClause, params)`` ready for ``Connection.execute``.
    """
    clauses: list[str] = []
    params: dict[str, object] = {}
    expanding: list[str] = []
    if statistics_filter.property_ids is not None:
        clauses.append("property_id IN :property_ids")
        params["property_ids"] = list(statistics_filter.property_ids)
        expanding.append("property_ids")
    if statistics_filter.property_id is not None:
        clauses.append("property_id = :property_id")
        params["property_id"] = statistics_filter.property_id
    if statistics_filter.key is not None:
        clauses.append("key = :key")
        params["key"] = StatisticKey(statistics_filter.key).value
    if statistics_filter.year is None:
        if statistics_filter.include_yearly:
            clauses.append("month = 0")
        else:
            clauses.append("year = 0 AND month = 0")
    else:
        clauses.append("year = :year")
        params["year"] = statistics_filter.year
        if statistics_filter.month is not None:
            clauses.append("month = :month")
            params["month"] = statistics_filter.month
        elif not statistics_filter.include_monthly:
            clauses.append("month = 0")
    sql = (
        "SELECT property_id, key, year, month, value_cents "
        "FROM property_statistics "
        f"WHERE {' AND '.join(clauses)} "
        "ORDER BY property_id, key, year, month"
    )
    statement = text(sql)
    if expanding:
        statement = statement.bindparams(
            *(bindparam(name, expanding=True) for name in expanding)
        )
    return statement, params


class SqlAlchemyStatisticsStore(StatisticsStorePort):
    """Statistic cell store backed by SQLAlchemy Core statements."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        retry_policy: RetryPolicy | None = None,
        logger=None,
    ) -> None:
        """Initialize the store adapter.

        Args:
            db_port: Port providing access to the statistics engine.
            retry_policy: Backoff applied to transient contention errors.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._retry_policy = retry_policy or RetryPolicy()
        self._logger = logger or get_app_logger()

    def prepare_store(self) -> None:
        """Ensure the statistic cell table exists."""
        engine = self._db_port.get_statistics_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_PROPERTY_STATISTICS_SQL)

    def accumulate(
        self,
        coordinates: Sequence[CellCoordinate],
        delta: Decimal,
    ) -> None:
        """Add ``delta`` to every coordinate inside one transaction.

        Args:
            coordinates: Cells to adjust; missing cells start from zero.
            delta: Signed amount added to each cell.
        """
        self.accumulate_many([(coordinates, delta)])

    def accumulate_many(
        self,
        changes: Sequence[tuple[Sequence[CellCoordinate], Decimal]],
    ) -> None:
        """Apply several deltas inside one transaction.

        A failure in any statement rolls back every change, so a retried
        event is never partially counted.

        Args:
            changes: ``(coordinates, delta)`` pairs; each delta is added to
                every coordinate of its pair.
        """
        batches = []
        for coordinates, delta in changes:
            cents = to_cents(delta)
            rows = [
                {**_coordinate_params(coordinate), "value_cents": cents}
                for coordinate in coordinates
            ]
            if rows:
                batches.append(rows)
        if not batches:
            return
        property_ids = sorted(
            {row["property_id"] for rows in batches for row in rows}
        )

        def unit() -> None:
            engine = self._db_port.get_statistics_engine()
            with engine.begin() as conn:
                for property_id in property_ids:
                    self._lock_property(conn, property_id, exclusive=False)
                for rows in batches:
                    conn.execute(ACCUMULATE_SQL, rows)

        self._run("accumulate", unit)

    def rebuild_property(
        self,
        property_id: int,
        keys: Collection[StatisticKey],
        compute: Callable[[], dict[CellCoordinate, Decimal]],
    ) -> int:
        """Replace the property's cells of ``keys`` under an exclusive lock.

        Args:
            property_id: Property to rebuild.
            keys: Metrics owned by the rebuild; BALANCE is refused.
            compute: Produces the new cell values once the lock is held.

        Returns:
            int: Number of cells written with a computed value.

        Raises:
            ValueError: If ``keys`` contains BALANCE or ``compute`` returns a
                cell outside the rebuilt property and keys.
        """
        owned = tuple(StatisticKey(key) for key in keys)
        if StatisticKey.BALANCE in owned:
            raise ValueError("BALANCE cells cannot be rebuilt from the ledger")
        if not owned:
            return 0

        def unit() -> int:
            engine = self._db_port.get_statistics_engine()
            with engine.begin() as conn:
                self._lock_property(conn, property_id, exclusive=True)
                conn.execute(
                    ZERO_CELLS_SQL,
                    {
                        "property_id": property_id,
                        "keys": [key.value for key in owned],
                    },
                )
                values = compute()
                payload = []
                for coordinate, value in sorted(
                    values.items(),
                    key=lambda item: _sort_key(item[0]),
                ):
                    if (
                        coordinate.property_id != property_id
                        or StatisticKey(coordinate.key) not in owned
                    ):
                        raise ValueError(
                            f"Cell {coordinate} is outside the rebuild of "
                            f"property {property_id}"
                        )
                    payload.append(
                        {
                            **_coordinate_params(coordinate),
                            "value_cents": to_cents(value),
                        }
                    )
                if payload:
                    conn.execute(REPLACE_CELLS_SQL, payload)
            return len(payload)

        return self._run("rebuild_property", unit)

    def fetch_value(self, coordinate: CellCoordinate) -> Decimal | None:
        """Return the value of one cell, or None if it does not exist."""

        def unit() -> Decimal | None:
            engine = self._db_port.get_statistics_engine()
            with engine.connect() as conn:
                value = conn.execute(
                    SELECT_VALUE_SQL,
                    _coordinate_params(coordinate),
                ).scalar_one_or_none()
            return None if value is None else from_cents(value)

        return self._run("fetch_value", unit)

    def search(self, statistics_filter: StatisticsFilter) -> list[StatisticRow]:
        """Return rows matching the filter ordered by coordinate.

        Args:
            statistics_filter: Search criteria.

        Returns:
            list[StatisticRow]: Matching rows; all-time before yearly before
            monthly within a property and key.
        """
        if (
            statistics_filter.property_ids is not None
            and not statistics_filter.property_ids
        ):
            return []
        statement, params = build_search_query(statistics_filter)

        def unit() -> list[StatisticRow]:
            engine = self._db_port.get_statistics_engine()
            with engine.connect() as conn:
                rows = conn.execute(statement, params).all()
            return [
                StatisticRow(
                    property_id=int(row.property_id),
                    key=StatisticKey(row.key),
                    year=_period(row.year),
                    month=_period(row.month),
                    value=from_cents(row.value_cents),
                )
                for row in rows
            ]

        return self._run("search", unit)

    def fetch_property_ids(self) -> list[int]:
        """Return properties owning at least one cell."""

        def unit() -> list[int]:
            engine = self._db_port.get_statistics_engine()
            with engine.connect() as conn:
                rows = conn.execute(SELECT_PROPERTY_IDS_SQL).scalars().all()
            return [int(value) for value in rows]

        return self._run("fetch_property_ids", unit)

    @staticmethod
    def _lock_property(
        conn: Connection,
        property_id: int,
        exclusive: bool,
    ) -> None:
        """Take the transaction-scoped property lock where supported.

        SQLite has no advisory locks; its database write lock, taken by the
        first write of the transaction, serializes writers instead.
        """
        if conn.engine.dialect.name != "postgresql":
            return
        conn.execute(
            EXCLUSIVE_LOCK_SQL if exclusive else SHARED_LOCK_SQL,
            {
                "namespace": STATISTICS_LOCK_NAMESPACE,
                "property_id": property_id,
            },
        )

    def _run(self, operation: str, unit: Callable[[], object]):
        """Run a unit of work with retries and typed error translation."""
        try:
            return retry_call(
                unit,
                policy=self._retry_policy,
                retry_on=is_transient_error,
                logger=self._logger,
            )
        except PoolTimeoutError as exc:
            self._logger.error(f"Statistics store {operation} timed out: {exc}")
            raise StatisticsStoreUnavailableError(operation, str(exc)) from exc
        except DBAPIError as exc:
            if is_transient_error(exc):
                self._logger.error(
                    f"Statistics store {operation} gave up after "
                    f"{self._retry_policy.total + 1} attempts"
                )
                raise StatisticsStoreContentionError(
                    operation,
                    self._retry_policy.total + 1,
                ) from exc
            if exc.connection_invalidated or isinstance(
                exc,
                (OperationalError, InterfaceError),
            ):
                self._logger.error(
                    f"Statistics store unavailable during {operation}: "
                    f"{exc.orig}"
                )
                raise StatisticsStoreUnavailableError(
                    operation,
                    str(exc.orig),
                ) from exc
            raise StatisticsStoreError(f"{operation} failed: {exc.orig}") from exc


def _sort_key(coordinate: CellCoordinate) -> tuple:
    return (
        coordinate.property_id,
        StatisticKey(coordinate.key).value,
        coordinate.year or NO_PERIOD,
        coordinate.month or NO_PERIOD,
    )


__all__ = [
    "SqlAlchemyStatisticsStore",
    "build_search_query",
    "is_transient_error",
    "CREATE_PROPERTY_STATISTICS_SQL",
    "ACCUMULATE_SQL",
    "REPLACE_CELLS_SQL",
    "ZERO_CELLS_SQL",
    "SELECT_VALUE_SQL",
    "SELECT_PROPERTY_IDS_SQL",
]
