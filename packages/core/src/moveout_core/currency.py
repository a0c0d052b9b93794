"""Integer-cent currency arithmetic.

Every total in the engine is produced by summing cent integers and converting
back once. Adding already-rounded decimals directly is never done, so a
budget recomputed any number of times lands on the same cent.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Magnitudes beyond a double's range are unreadable, like non-finite input.
MAX_AMOUNT_EXPONENT = 308


def to_decimal(value: Any) -> Decimal:
    """Coerce a number or numeric string to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. Booleans, ``None`` and anything unparseable
    become zero. Non-finite values are returned as-is so callers can detect
    them; ``to_cents`` maps them to zero.
    """
    if isinstance(value, bool) or value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            return Decimal(text)
        except InvalidOperation:
            return ZERO
    return ZERO


def finite_amount(value: Any) -> Decimal:
    """``to_decimal`` with non-finite and out-of-range values mapped to 0."""
    amount = to_decimal(value)
    if not amount.is_finite() or amount.adjusted() > MAX_AMOUNT_EXPONENT:
        return ZERO
    return amount


def quantize_exact(value: Decimal, exponent: Decimal) -> Decimal:
    """Quantize half up with enough precision for any in-range magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.as_tuple().exponent + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def to_cents(value: Any) -> int:
    """Convert an amount to integer cents, rounding half up.

    Non-finite and out-of-range amounts convert to 0.
    """
    amount = finite_amount(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 6)
        return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-decimal amount."""
    amount = Decimal(cents)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return amount.scaleb(-2).quantize(CENT)


def round_currency(value: Any) -> Decimal:
    """Round an amount to the nearest cent."""
    return from_cents(to_cents(value))


def sum_cents(values: Iterable[Any]) -> int:
    """Sum amounts by their cent representations."""
    return sum((to_cents(value) for value in values), 0)


def sum_currency(values: Iterable[Any]) -> Decimal:
    """Sum amounts in cents and return a two-decimal amount."""
    return from_cents(sum_cents(values))


def subtract_currency(minuend: Any, subtrahend: Any) -> Decimal:
    """Return ``minuend - subtrahend`` computed in cents."""
    return from_cents(to_cents(minuend) - to_cents(subtrahend))


__all__ = [
    "CENT",
    "ZERO",
    "MAX_AMOUNT_EXPONENT",
    "to_decimal",
    "finite_amount",
    "quantize_exact",
    "to_cents",
    "from_cents",
    "round_currency",
    "sum_cents",
    "sum_currency",
    "subtract_currency",
]
