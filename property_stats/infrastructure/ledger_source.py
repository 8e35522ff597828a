"""Read accepted ledger facts grouped per property and month.

The ledger tables are owned by the accounting subsystem:

- ``"transaction"``: id, property_id, type, status, amount, accounting_date
- ``income``: id, property_id, transaction_id, income_type_id,
  accounting_date, total_amount
- ``expense``: id, property_id, transaction_id, accounting_date,
  total_amount

Types and statuses are stored as their lowercase names. Incomes and
expenses count when they have no transaction or their transaction is
accepted.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import text

from property_stats.application.ports.database import DatabaseEnginePort
from property_stats.application.ports.ledger_source import LedgerSourcePort
from property_stats.domain.constants import (
    StatisticKey,
    TransactionStatus,
    TransactionType,
)
from property_stats.domain.models import LedgerMonthlyTotal
from property_stats.infrastructure.logging.logger import get_app_logger
from property_stats.utils.decimal_utils import quantize_amount


@dataclass(frozen=True)
class LedgerQuerySpec:
    """Specification for reading the monthly totals of one metric.

    Attributes:
        key: Metric fed by the query.
        sign: Multiplier turning ledger amounts into the metric's sign.
        select_sql: Query template; ``{year}`` and ``{month}`` are replaced
            with the dialect's date part expressions.
        date_column: Column the year/month are extracted from.
        params: Static bind parameters of the query.
        rental_only: Query needs the rental income category.
    """

    key: StatisticKey
    sign: int
    select_sql: str
    date_column: str
    params: dict[str, object]
    rental_only: bool = False


_INCOME_SQL = """
    SELECT
        {year} AS year,
        {month} AS month,
        COUNT(i.id) AS row_count,
        COALESCE(SUM(i.total_amount), 0) AS total
    FROM income i
    LEFT JOIN "transaction" t ON t.id = i.transaction_id
    WHERE i.property_id = :property_id
      AND (i.transaction_id IS NULL OR t.status = :accepted)
    GROUP BY {year}, {month}
"""

_EXPENSE_SQL = """
    SELECT
        {year} AS year,
        {month} AS month,
        COUNT(e.id) AS row_count,
        COALESCE(SUM(e.total_amount), 0) AS total
    FROM expense e
    LEFT JOIN "transaction" t ON t.id = e.transaction_id
    WHERE e.property_id = :property_id
      AND (e.transaction_id IS NULL OR t.status = :accepted)
    GROUP BY {year}, {month}
"""

_TRANSACTION_TYPE_SQL = """
    SELECT
        {year} AS year,
        {month} AS month,
        COUNT(t.id) AS row_count,
        COALESCE(SUM(t.amount), 0) AS total
    FROM "transaction" t
    WHERE t.property_id = :property_id
      AND t.status = :accepted
      AND t.type = :transaction_type
    GROUP BY {year}, {month}
"""

_RENTAL_TRANSACTIONS_SQL = """
    SELECT
        {year} AS year,
        {month} AS month,
        COUNT(DISTINCT i.transaction_id) AS row_count,
        COUNT(DISTINCT i.transaction_id) AS total
    FROM income i
    JOIN "transaction" t ON t.id = i.transaction_id
    WHERE i.property_id = :property_id
      AND t.status = :accepted
      AND i.income_type_id = :rental_income_type_id
    GROUP BY {year}, {month}
"""

_RENTAL_STANDALONE_SQL = """
    SELECT
        {year} AS year,
        {month} AS month,
        COUNT(i.id) AS row_count,
        COUNT(i.id) AS total
    FROM income i
    WHERE i.property_id = :property_id
      AND i.transaction_id IS NULL
      AND i.income_type_id = :rental_income_type_id
    GROUP BY {year}, {month}
"""

_LEDGER_SPECS = (
    LedgerQuerySpec(
        key=StatisticKey.INCOME,
        sign=1,
        select_sql=_INCOME_SQL,
        date_column="i.accounting_date",
        params={},
    ),
    LedgerQuerySpec(
        key=StatisticKey.EXPENSE,
        sign=1,
        select_sql=_EXPENSE_SQL,
        date_column="e.accounting_date",
        params={},
    ),
    LedgerQuerySpec(
        key=StatisticKey.DEPOSIT,
        sign=1,
        select_sql=_TRANSACTION_TYPE_SQL,
        date_column="t.accounting_date",
        params={"transaction_type": TransactionType.DEPOSIT.value},
    ),
    LedgerQuerySpec(
        key=StatisticKey.WITHDRAW,
        sign=-1,
        select_sql=_TRANSACTION_TYPE_SQL,
        date_column="t.accounting_date",
        params={"transaction_type": TransactionType.WITHDRAW.value},
    ),
    LedgerQuerySpec(
        key=StatisticKey.RENTAL_VISITS,
        sign=1,
        select_sql=_RENTAL_TRANSACTIONS_SQL,
        date_column="i.accounting_date",
        params={},
        rental_only=True,
    ),
    LedgerQuerySpec(
        key=StatisticKey.RENTAL_VISITS,
        sign=1,
        select_sql=_RENTAL_STANDALONE_SQL,
        date_column="i.accounting_date",
        params={},
        rental_only=True,
    ),
)

SELECT_LEDGER_PROPERTY_IDS_SQL = text(
    """
    SELECT property_id FROM "transaction" WHERE property_id IS NOT NULL
    UNION
    SELECT property_id FROM income WHERE property_id IS NOT NULL
    UNION
    SELECT property_id FROM expense WHERE property_id IS NOT NULL
    ORDER BY property_id
    """
)


def date_part_expressions(dialect: str, column: str) -> tuple[str, str]:
    """Return SQL expressions extracting year and month from a date column.

    Args:
        dialect: SQLAlchemy dialect name.
        column: Qualified column name.

    Returns:
        tuple[str, str]: Year and month expressions as integers.
    """
    if dialect == "sqlite":
        return (
            f"CAST(strftime('%Y', {column}) AS INTEGER)",
            f"CAST(strftime('%m', {column}) AS INTEGER)",
        )
    return (
        f"CAST(EXTRACT(YEAR FROM {column}) AS INTEGER)",
        f"CAST(EXTRACT(MONTH FROM {column}) AS INTEGER)",
    )


class SqlAlchemyLedgerSource(LedgerSourcePort):
    """Ledger reader backed by the accounting database."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the ledger reader.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def fetch_monthly_totals(
        self,
        property_id: int,
        rental_income_type_id: int | None = None,
    ) -> list[LedgerMonthlyTotal]:
        """Return accepted facts of one property summed per key and month.

        Args:
            property_id: Property whose ledger is read.
            rental_income_type_id: Income category counted as a rental visit;
                None disables rental visit counting.

        Returns:
            list[LedgerMonthlyTotal]: Totals already carrying the metric sign.
        """
        engine = self._db_port.get_ledger_engine()
        totals: list[LedgerMonthlyTotal] = []
        with engine.connect() as conn:
            dialect = conn.engine.dialect.name
            for spec in _LEDGER_SPECS:
                if spec.rental_only and rental_income_type_id is None:
                    continue
                year_expr, month_expr = date_part_expressions(
                    dialect,
                    spec.date_column,
                )
                statement = text(
                    spec.select_sql.format(year=year_expr, month=month_expr)
                )
                params = {
                    "property_id": property_id,
                    "accepted": TransactionStatus.ACCEPTED.value,
                    **spec.params,
                }
                if spec.rental_only:
                    params["rental_income_type_id"] = rental_income_type_id
                for row in conn.execute(statement, params):
                    if row.year is None or row.month is None:
                        self._logger.warning(
                            f"Skipping {spec.key.value} ledger rows without "
                            f"accounting date for property {property_id}"
                        )
                        continue
                    totals.append(
                        LedgerMonthlyTotal(
                            property_id=property_id,
                            key=spec.key,
                            year=int(row.year),
                            month=int(row.month),
                            count=int(row.row_count),
                            total=quantize_amount(row.total) * spec.sign,
                        )
                    )
        return sorted(
            totals,
            key=lambda row: (row.key.value, row.year, row.month),
        )

    def fetch_property_ids(self) -> list[int]:
        """Return every property referenced by the ledger tables."""
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            values = conn.execute(SELECT_LEDGER_PROPERTY_IDS_SQL).scalars().all()
        return [int(value) for value in values]


__all__ = [
    "LedgerQuerySpec",
    "SqlAlchemyLedgerSource",
    "SELECT_LEDGER_PROPERTY_IDS_SQL",
    "date_part_expressions",
]
