"""Application use cases package."""

from .apply_delta import ApplyDeltaUseCase
from .handle_ledger_events import LedgerEventHandler
from .query_statistics import QueryStatisticsUseCase
from .recalculate_statistics import RecalculateStatisticsUseCase

__all__ = [
    "ApplyDeltaUseCase",
    "LedgerEventHandler",
    "QueryStatisticsUseCase",
    "RecalculateStatisticsUseCase",
]
