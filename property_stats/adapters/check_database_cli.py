"""CLI adapter verifying that both databases hold the expected tables.

The statistics database must contain ``property_statistics`` and the ledger
database the ``transaction``, ``income`` and ``expense`` tables. Set
``STATS_CHECK_CREATE_STORE`` to create a missing statistics table.
"""

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from property_stats.adapters._env import read_flag
from property_stats.infrastructure.container import (
    build_database_adapter,
    build_statistics_store,
)
from property_stats.infrastructure.logging.logger import get_app_logger

STATISTICS_TABLES = ("property_statistics",)
LEDGER_TABLES = ("transaction", "income", "expense")


def missing_tables(engine, tables) -> list[str]:
    """Return the names in ``tables`` that do not exist on ``engine``."""
    inspector = inspect(engine)
    return [name for name in tables if not inspector.has_table(name)]


def _check(label: str, engine, tables, logger) -> bool:
    url = engine.url.render_as_string(hide_password=True)
    try:
        missing = missing_tables(engine, tables)
    except SQLAlchemyError as exc:
        logger.error(f"{label} database {url} is unreachable: {exc}")
        print(f"{label}: unreachable")
        return False
    if missing:
        logger.error(f"{label} database {url} lacks tables: {', '.join(missing)}")
        print(f"{label}: missing {', '.join(missing)}")
        return False
    logger.info(f"{label} database {url} has {', '.join(tables)}")
    print(f"{label}: ok")
    return True


def main() -> int:
    """Check both databases and return a process exit status."""
    logger = get_app_logger()
    adapter = build_database_adapter()
    if read_flag("STATS_CHECK_CREATE_STORE"):
        build_statistics_store(adapter)
        logger.info("Statistics table ensured.")

    results = [
        _check(
            "Statistics",
            adapter.get_statistics_engine(),
            STATISTICS_TABLES,
            logger,
        ),
        _check("Ledger", adapter.get_ledger_engine(), LEDGER_TABLES, logger),
    ]
    return 0 if all(results) else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
