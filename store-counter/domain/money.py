"""
Domain: Monetary amounts.

Amounts are Decimal values. Persisted documents carry them as JSON numbers,
so every inbound value goes through `Decimal(str(value))` to avoid binary
float artifacts (Decimal(0.1) != Decimal("0.1")).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENTS = Decimal("0.01")

# Largest amount a persisted JSON number carries to the cent
MAX_AMOUNT = Decimal("999999999.99")


def to_amount(name: str, value: Any) -> Decimal:
    """
    Coerce `value` into a non-negative Decimal amount.

    Raises ValueError for non-numeric, non-finite, negative or oversized
    input, and for values with more precision than a JSON number keeps.
    """

    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"{name} must be finite")
    if amount < 0:
        raise ValueError(f"{name} must be >= 0")
    if amount > MAX_AMOUNT:
        raise ValueError(f"{name} must be <= {MAX_AMOUNT}")
    if Decimal(repr(float(amount))) != amount:
        raise ValueError(f"{name} has more precision than can be stored: {value!r}")
    return amount


def round_cents(amount: Decimal) -> Decimal:
    """Round half-up to two decimal places (never truncate)."""

    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal) -> str:
    """
    Format an amount for display, e.g. Decimal("1234.5") -> "$1,234.50".

    Negative amounts (a loss) render as "-$1.00".
    """

    rounded = round_cents(Decimal(amount))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def to_json_number(amount: Decimal) -> float | int:
    """Render a Decimal as a plain JSON number for persisted documents."""

    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)
