"""Tests for the composition root."""

from unittest.mock import MagicMock

from property_stats.application.use_cases import (
    LedgerEventHandler,
    QueryStatisticsUseCase,
    RecalculateStatisticsUseCase,
)
from property_stats.infrastructure import container
from property_stats.infrastructure.ledger_source import SqlAlchemyLedgerSource
from property_stats.infrastructure.settings import StatisticsSettings
from property_stats.infrastructure.statistics_store import (
    SqlAlchemyStatisticsStore,
)


def test_build_statistics_store_prepares_table(sqlite_db) -> None:
    store = container.build_statistics_store(
        sqlite_db,
        StatisticsSettings(max_retries=2),
    )

    assert isinstance(store, SqlAlchemyStatisticsStore)
    assert store.fetch_property_ids() == []


def test_build_recalculate_use_case_wires_settings(sqlite_db) -> None:
    use_case = container.build_recalculate_statistics_use_case(
        sqlite_db,
        StatisticsSettings(rental_income_type_id=8),
    )

    assert isinstance(use_case, RecalculateStatisticsUseCase)
    assert use_case._rental_income_type_id == 8
    assert isinstance(use_case._ledger, SqlAlchemyLedgerSource)


def test_build_ledger_event_handler_uses_given_store() -> None:
    store = MagicMock()

    handler = container.build_ledger_event_handler(
        store,
        StatisticsSettings(rental_income_type_id=5),
    )

    assert isinstance(handler, LedgerEventHandler)
    assert handler._rental_income_type_id == 5
    store.prepare_store.assert_not_called()


def test_build_query_use_case(sqlite_db) -> None:
    use_case = container.build_query_statistics_use_case(
        sqlite_db,
        StatisticsSettings(),
    )

    assert isinstance(use_case, QueryStatisticsUseCase)


def test_build_database_adapter_defaults(monkeypatch) -> None:
    sentinel = object()
    monkeypatch.setattr(
        container,
        "SqlAlchemyDatabaseEngineAdapter",
        lambda: sentinel,
    )

    assert container.build_database_adapter() is sentinel
