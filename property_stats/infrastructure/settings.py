"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from typing import Optional

import dotenv

from property_stats.infrastructure.logging.logger import get_app_logger
from property_stats.infrastructure.retry import RetryPolicy


@dataclass(frozen=True)
class StatisticsSettings:
    """Settings of the statistics engine.

    Attributes:
        rental_income_type_id: Income category counted as a rental visit;
            None disables rental visit counting.
        max_retries: Retries of a store operation hitting contention.
        retry_base_delay: First backoff delay in seconds.
        retry_max_delay: Upper bound of a single backoff delay in seconds.
    """

    rental_income_type_id: Optional[int] = None
    max_retries: int = 5
    retry_base_delay: float = 0.05
    retry_max_delay: float = 1.0

    @classmethod
    def from_env(cls) -> "StatisticsSettings":
        """Build settings from environment variables.

        Invalid values are logged and replaced by their defaults.

        Returns:
            StatisticsSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        defaults = cls()
        rental = cls._read_int(
            "STATS_RENTAL_INCOME_TYPE_ID",
            None,
            logger,
            minimum=1,
        )
        max_retries = cls._read_int(
            "STATS_MAX_RETRIES",
            defaults.max_retries,
            logger,
            minimum=0,
        )
        base_delay = cls._read_float(
            "STATS_RETRY_BASE_DELAY",
            defaults.retry_base_delay,
            logger,
        )
        max_delay = cls._read_float(
            "STATS_RETRY_MAX_DELAY",
            defaults.retry_max_delay,
            logger,
        )
        if max_delay < base_delay:
            logger.warning(
                f"STATS_RETRY_MAX_DELAY ({max_delay}) is below "
                f"STATS_RETRY_BASE_DELAY ({base_delay}); using {base_delay}"
            )
            max_delay = base_delay
        return cls(
            rental_income_type_id=rental,
            max_retries=max_retries,
            retry_base_delay=base_delay,
            retry_max_delay=max_delay,
        )

    def retry_policy(self) -> RetryPolicy:
        """Return the store retry policy described by these settings."""
        return RetryPolicy(
            total=self.max_retries,
            base=self.retry_base_delay,
            cap=self.retry_max_delay,
        )

    @staticmethod
    def _read_int(
        name: str,
        default: Optional[int],
        logger,
        minimum: int,
    ) -> Optional[int]:
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            logger.warning(f"Invalid integer for {name}: {raw!r}")
            return default
        if value < minimum:
            logger.warning(f"{name} must be at least {minimum}, got {value}")
            return default
        return value

    @staticmethod
    def _read_float(name: str, default: float, logger) -> float:
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Invalid number for {name}: {raw!r}")
            return default
        if value < 0 or value != value:
            logger.warning(f"{name} must be a non-negative number, got {raw!r}")
            return default
        return value


__all__ = ["StatisticsSettings"]
