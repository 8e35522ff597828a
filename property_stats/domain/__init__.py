"""Domain package for statistic cells, ledger facts and delta rules."""

from .constants import (
    RECALCULABLE_KEYS,
    StatisticKey,
    TransactionStatus,
    TransactionType,
)
from .exceptions import (
    MalformedEventError,
    StatisticsError,
    StatisticsStoreContentionError,
    StatisticsStoreError,
    StatisticsStoreUnavailableError,
)

__all__ = [
    "RECALCULABLE_KEYS",
    "StatisticKey",
    "TransactionStatus",
    "TransactionType",
    "MalformedEventError",
    "StatisticsError",
    "StatisticsStoreContentionError",
    "StatisticsStoreError",
    "StatisticsStoreUnavailableError",
]
