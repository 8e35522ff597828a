"""SQLAlchemy engines for the statistics store and the ledger.

``STATISTICS_DB_URL`` is required. ``LEDGER_DB_URL`` is optional; without it
the ledger is read from the statistics database. Both are read from the
environment after loading a ``.env`` file when present.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool

from property_stats.application.ports.database import DatabaseEnginePort

STATISTICS_URL_VAR = "STATISTICS_DB_URL"
LEDGER_URL_VAR = "LEDGER_DB_URL"
SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _read_url(name: str, required: bool = True) -> str | None:
    """Return a database URL from the environment.

    Raises:
        RuntimeError: If ``required`` and the variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name, "").strip()
    if not value:
        if required:
            raise RuntimeError(f"Missing environment variable: {name}")
        return None
    return value


def _engine_options(db_url: str) -> dict:
    """Return pooling options, plus a busy timeout for SQLite files.

    SQLite writers wait on the database lock for up to
    ``SQLITE_BUSY_TIMEOUT_SECONDS`` before the store retries them.
    """
    options = {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 5,
        "pool_pre_ping": True,
        "future": True,
    }
    if make_url(db_url).get_backend_name() == "sqlite":
        options["connect_args"] = {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS}
    return options


def _create_engine(db_url: str) -> Engine:
    return create_engine(db_url, **_engine_options(db_url))


_statistics_engine: Optional[Engine] = None
_ledger_engine: Optional[Engine] = None


def get_statistics_engine() -> Engine:
    """Return the process-wide engine holding the statistic cells."""
    global _statistics_engine
    if _statistics_engine is None:
        _statistics_engine = _create_engine(_read_url(STATISTICS_URL_VAR))
    return _statistics_engine


def get_ledger_engine() -> Engine:
    """Return the process-wide ledger engine.

    Falls back to the statistics engine when ``LEDGER_DB_URL`` is unset.
    """
    global _ledger_engine
    if _ledger_engine is None:
        db_url = _read_url(LEDGER_URL_VAR, required=False)
        if db_url is None:
            return get_statistics_engine()
        _ledger_engine = _create_engine(db_url)
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort serving the module-level engines."""

    def get_statistics_engine(self) -> Engine:
        return get_statistics_engine()

    def get_ledger_engine(self) -> Engine:
        return get_ledger_engine()


__all__ = [
    "get_statistics_engine",
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
