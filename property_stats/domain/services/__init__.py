"""Domain services package."""

from .deltas import (
    is_accepted,
    negate_deltas,
    parse_transaction_status,
    parse_transaction_type,
    standalone_expense_deltas,
    standalone_income_deltas,
    transaction_deltas,
)
from .granularity import cell_coordinates, roll_up_monthly_totals

__all__ = [
    "cell_coordinates",
    "roll_up_monthly_totals",
    "is_accepted",
    "negate_deltas",
    "parse_transaction_status",
    "parse_transaction_type",
    "standalone_expense_deltas",
    "standalone_income_deltas",
    "transaction_deltas",
]
