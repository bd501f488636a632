"""
Money Utilities - Decimal arithmetic for prices, tax and totals.

Floats never enter a calculation: values are converted on the way in and only
turned back into floats at the JSON boundary.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Numeric = Union[str, int, float, Decimal]

# Cents
MONEY_PRECISION = Decimal("0.01")

ZERO = Decimal("0.00")


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """
    Convert any value to Decimal.

    Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
    None and unparseable input become ``Decimal("0")``; callers that must
    reject bad input use ``parse_decimal`` instead.
    """
    if value is None:
        return Decimal("0")
    try:
        return parse_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_decimal(value: Numeric) -> Decimal:
    """Strict conversion: raises on bool, NaN, infinity or garbage."""
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        result = Decimal(value)
    if not result.is_finite():
        raise InvalidOperation(f"non-finite monetary value: {value!r}")
    return result


def parse_price(value: Numeric) -> Decimal:
    """
    Strict conversion for catalog prices and rates.

    Raises:
        ValueError: not a finite number, or negative
    """
    try:
        result = parse_decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"invalid price: {value!r}") from e
    if result < 0:
        raise ValueError(f"negative price: {result}")
    return result


def round_money(value: Numeric) -> Decimal:
    """Round to cents, half up (2.345 -> 2.35)."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Multiply a monetary value by a quantity or rate."""
    return to_decimal(value) * to_decimal(factor)


def add(a: Numeric, b: Numeric) -> Decimal:
    """Add two monetary values."""
    return to_decimal(a) + to_decimal(b)


def to_float(value: Numeric) -> float:
    """
    Convert to float for JSON responses.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def format_money(value: Numeric) -> str:
    """Format a CAD amount for display, e.g. ``$1,234.50``."""
    return f"${round_money(value):,.2f}"
