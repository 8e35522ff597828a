"""Typed exceptions raised by the statistics engine.

Every exception carries a machine readable ``code`` so adapters can map
failures without parsing messages.
"""


class StatisticsError(Exception):
    """Base class for statistics engine failures."""

    code: str = "STATISTICS_ERROR"
    retryable: bool = False


class MalformedEventError(StatisticsError):
    """A ledger event cannot be translated into statistic deltas."""

    code = "MALFORMED_EVENT"

    def __init__(self, reason: str, transaction_id=None) -> None:
        self.reason = reason
        self.transaction_id = transaction_id
        super().__init__(
            f"Malformed ledger event (transaction={transaction_id}): {reason}"
        )


class StatisticsStoreError(StatisticsError):
    """The statistic cell store rejected an operation."""

    code = "STORE_ERROR"


class StatisticsStoreContentionError(StatisticsStoreError):
    """Concurrent writers kept conflicting after every retry attempt."""

    code = "STORE_CONTENTION"
    retryable = True

    def __init__(self, operation: str, attempts: int) -> None:
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"{operation} still conflicting after {attempts} attempts"
        )


class StatisticsStoreUnavailableError(StatisticsStoreError):
    """The backing database cannot be reached."""

    code = "STORE_UNAVAILABLE"

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed, store unavailable: {detail}")


__all__ = [
    "StatisticsError",
    "MalformedEventError",
    "StatisticsStoreError",
    "StatisticsStoreContentionError",
    "StatisticsStoreUnavailableError",
]
