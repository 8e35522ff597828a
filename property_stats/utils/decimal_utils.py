"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from property_stats.domain.constants import AMOUNT_QUANTUM


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, events or adapters.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a numeric amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    return result


def quantize_amount(value) -> Decimal:
    """Return ``value`` as a Decimal rounded half-up to cents."""
    return coerce_decimal(value).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def to_cents(value) -> int:
    """Return ``value`` as an integer number of cents, rounded half-up."""
    return int(quantize_amount(value).scaleb(2))


def from_cents(cents) -> Decimal:
    """Return an integer number of cents as a two-digit Decimal."""
    return (Decimal(int(cents)) / 100).quantize(AMOUNT_QUANTUM)


__all__ = ["coerce_decimal", "quantize_amount", "to_cents", "from_cents"]
