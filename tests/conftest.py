"""Shared fixtures for the statistics engine tests."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from property_stats.infrastructure.logging import logger as logger_module


@pytest.fixture(autouse=True, scope="session")
def _isolate_log_files(tmp_path_factory):
    """Keep log files written by default loggers out of the project tree."""
    log_root = tmp_path_factory.mktemp("log_root")
    with pytest.MonkeyPatch.context() as patch:
        patch.setattr(logger_module, "get_project_root", lambda: log_root)
        yield


class SqliteDatabasePort:
    """DatabaseEnginePort serving one file-backed SQLite engine."""

    def __init__(self, path: Path) -> None:
        self.engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"timeout": 30},
        )

    def get_statistics_engine(self):
        return self.engine

    def get_ledger_engine(self):
        return self.engine


LEDGER_SCHEMA = (
    """
    CREATE TABLE "transaction" (
        id INTEGER PRIMARY KEY,
        property_id INTEGER,
        type TEXT NOT NULL,
        status TEXT NOT NULL,
        amount NUMERIC(15, 2) NOT NULL,
        accounting_date DATE
    )
    """,
    """
    CREATE TABLE income (
        id INTEGER PRIMARY KEY,
        property_id INTEGER NOT NULL,
        transaction_id INTEGER,
        income_type_id INTEGER,
        accounting_date DATE,
        total_amount NUMERIC(15, 2) NOT NULL
    )
    """,
    """
    CREATE TABLE expense (
        id INTEGER PRIMARY KEY,
        property_id INTEGER NOT NULL,
        transaction_id INTEGER,
        accounting_date DATE,
        total_amount NUMERIC(15, 2) NOT NULL
    )
    """,
)


class LedgerWriter:
    """Inserts ledger rows into the SQLite test schema."""

    def __init__(self, engine) -> None:
        self._engine = engine
        self._next_id = 1

    def _id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def transaction(
        self,
        property_id,
        tx_type,
        amount,
        on,
        status="accepted",
    ) -> int:
        tx_id = self._id()
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    'INSERT INTO "transaction" '
                    "(id, property_id, type, status, amount, accounting_date) "
                    "VALUES (:id, :property_id, :type, :status, :amount, :on)"
                ),
                {
                    "id": tx_id,
                    "property_id": property_id,
                    "type": tx_type,
                    "status": status,
                    "amount": str(amount),
                    "on": on,
                },
            )
        return tx_id

    def income(
        self,
        property_id,
        amount,
        on,
        transaction_id=None,
        income_type_id=None,
    ) -> int:
        income_id = self._id()
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO income (id, property_id, transaction_id, "
                    "income_type_id, accounting_date, total_amount) "
                    "VALUES (:id, :property_id, :transaction_id, "
                    ":income_type_id, :on, :amount)"
                ),
                {
                    "id": income_id,
                    "property_id": property_id,
                    "transaction_id": transaction_id,
                    "income_type_id": income_type_id,
                    "on": on,
                    "amount": str(amount),
                },
            )
        return income_id

    def expense(self, property_id, amount, on, transaction_id=None) -> int:
        expense_id = self._id()
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO expense (id, property_id, transaction_id, "
                    "accounting_date, total_amount) "
                    "VALUES (:id, :property_id, :transaction_id, :on, :amount)"
                ),
                {
                    "id": expense_id,
                    "property_id": property_id,
                    "transaction_id": transaction_id,
                    "on": on,
                    "amount": str(amount),
                },
            )
        return expense_id


@pytest.fixture()
def sqlite_db(tmp_path: Path) -> SqliteDatabasePort:
    """File-backed SQLite database port with the ledger tables created."""
    port = SqliteDatabasePort(tmp_path / "statistics.db")
    with port.engine.begin() as conn:
        for statement in LEDGER_SCHEMA:
            conn.exec_driver_sql(statement)
    yield port
    port.engine.dispose()


@pytest.fixture()
def ledger(sqlite_db: SqliteDatabasePort) -> LedgerWriter:
    """Helper inserting ledger rows into ``sqlite_db``."""
    return LedgerWriter(sqlite_db.engine)
