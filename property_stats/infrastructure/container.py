"""Composition root for wiring infrastructure adapters."""

from property_stats.application.ports.database import DatabaseEnginePort
from property_stats.application.ports.ledger_source import LedgerSourcePort
from property_stats.application.ports.statistics_store import (
    StatisticsStorePort,
)
from property_stats.application.use_cases import (
    ApplyDeltaUseCase,
    LedgerEventHandler,
    QueryStatisticsUseCase,
    RecalculateStatisticsUseCase,
)
from property_stats.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from property_stats.infrastructure.ledger_source import SqlAlchemyLedgerSource
from property_stats.infrastructure.logging.logger import (
    get_app_logger,
    get_event_logger,
)
from property_stats.infrastructure.settings import StatisticsSettings
from property_stats.infrastructure.statistics_store import (
    SqlAlchemyStatisticsStore,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_statistics_store(
    db_port: DatabaseEnginePort | None = None,
    settings: StatisticsSettings | None = None,
) -> StatisticsStorePort:
    """Return the statistic cell store with its table in place."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or StatisticsSettings.from_env()
    store = SqlAlchemyStatisticsStore(
        resolved_db,
        retry_policy=resolved_settings.retry_policy(),
        logger=get_app_logger(),
    )
    store.prepare_store()
    return store


def build_ledger_source(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerSourcePort:
    """Return the ledger reader."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerSource(resolved_db, logger=get_app_logger())


def build_apply_delta_use_case(
    store: StatisticsStorePort | None = None,
) -> ApplyDeltaUseCase:
    """Return the delta applier."""
    return ApplyDeltaUseCase(
        store or build_statistics_store(),
        logger=get_app_logger(),
    )


def build_ledger_event_handler(
    store: StatisticsStorePort | None = None,
    settings: StatisticsSettings | None = None,
) -> LedgerEventHandler:
    """Return the ledger event subscriber."""
    resolved_settings = settings or StatisticsSettings.from_env()
    resolved_store = store or build_statistics_store(settings=resolved_settings)
    return LedgerEventHandler(
        build_apply_delta_use_case(resolved_store),
        rental_income_type_id=resolved_settings.rental_income_type_id,
        logger=get_event_logger(),
    )


def build_recalculate_statistics_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: StatisticsSettings | None = None,
) -> RecalculateStatisticsUseCase:
    """Return the recalculation use case."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or StatisticsSettings.from_env()
    return RecalculateStatisticsUseCase(
        build_statistics_store(resolved_db, resolved_settings),
        build_ledger_source(resolved_db),
        rental_income_type_id=resolved_settings.rental_income_type_id,
        logger=get_app_logger(),
    )


def build_query_statistics_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: StatisticsSettings | None = None,
) -> QueryStatisticsUseCase:
    """Return the read-only query use case."""
    return QueryStatisticsUseCase(
        build_statistics_store(db_port, settings),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_statistics_store",
    "build_ledger_source",
    "build_apply_delta_use_case",
    "build_ledger_event_handler",
    "build_recalculate_statistics_use_case",
    "build_query_statistics_use_case",
]
