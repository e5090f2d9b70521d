"""Fixed-point money helpers. Amounts are stored as integer cents."""

from decimal import Decimal, ROUND_HALF_EVEN

CENT = Decimal("0.01")


def to_decimal(cents: int) -> Decimal:
    """``1999`` -> ``Decimal('19.99')``. Exact, no rounding."""
    return Decimal(cents).scaleb(-2)


def to_cents(amount) -> int:
    value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    if value != value.quantize(CENT, rounding=ROUND_HALF_EVEN):
        raise ValueError(f"amount {amount} has more than two decimal places")
    return int(value.scaleb(2))
