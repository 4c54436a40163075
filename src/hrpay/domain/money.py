"""Decimal helpers for currency amounts."""
from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce int/float/str/Decimal to Decimal without binary float noise.

    Raises ``InvalidOperation`` for booleans and values that do not parse.
    """
    if isinstance(value, bool):
        raise InvalidOperation(f"boolean is not an amount: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        return Decimal(str(value))
    raise InvalidOperation(f"unsupported amount type: {type(value).__name__}")


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
