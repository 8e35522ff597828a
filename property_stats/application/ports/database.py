"""Database ports for the statistics engine.

This module defines the application-layer protocol for accessing database
engines. Infrastructure implementations are expected to provide concrete
adapters that satisfy it.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing database engines for statistics and ledger data."""

    def get_statistics_engine(self) -> Engine:
        """Get the engine holding the statistic cell table.

        Returns:
            Engine: SQLAlchemy engine connected to the statistics store.
        """

    def get_ledger_engine(self) -> Engine:
        """Get the engine holding the canonical ledger tables.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger.
        """


__all__ = ["DatabaseEnginePort"]
