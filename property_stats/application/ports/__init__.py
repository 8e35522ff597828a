"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_source import LedgerSourcePort
from .statistics_store import StatisticsStorePort

__all__ = [
    "DatabaseEnginePort",
    "LedgerSourcePort",
    "StatisticsStorePort",
]
