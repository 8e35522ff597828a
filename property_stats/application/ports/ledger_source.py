"""Port for reading canonical ledger facts."""

from typing import Protocol

from property_stats.domain.models import LedgerMonthlyTotal


class LedgerSourcePort(Protocol):
    """Port exposing accepted ledger facts grouped per month."""

    def fetch_monthly_totals(
        self,
        property_id: int,
        rental_income_type_id: int | None = None,
    ) -> list[LedgerMonthlyTotal]:
        """Return accepted facts of one property summed per key and month.

        Totals already carry the sign of the metric they feed.
        """

    def fetch_property_ids(self) -> list[int]:
        """Return every property with ledger activity."""


__all__ = ["LedgerSourcePort"]
