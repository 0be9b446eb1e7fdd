"""Decimal amount utilities.

Wallet amounts arrive as JSON numbers or numeric strings ("20000.00",
"1,500", "RWF 2 000"). All arithmetic is done on Decimal, never float.
"""

import re
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_decimal(value: object) -> Decimal | None:
    """Parse a raw amount into a Decimal. Returns None when absent or unparsable.

    Numbers convert directly. For strings, formatting characters (thousands
    separators, currency codes, spaces) are stripped before parsing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr keeps exponent notation (1e+16, 1.5e-05) intact
        result = Decimal(repr(value))
        return result if result.is_finite() else None
    if not isinstance(value, str):
        return None
    cleaned = _NON_NUMERIC.sub("", value)
    if not cleaned:
        return None
    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def to_magnitude(value: object) -> Decimal | None:
    """Non-negative magnitude of a raw amount, or None if unparsable."""
    parsed = parse_decimal(value)
    if parsed is None:
        return None
    return abs(parsed)


def format_amount(amount: Decimal, currency: str = "RWF") -> str:
    """Display string: Decimal("100000") -> '100,000 RWF', Decimal("-12.5") -> '-12.50 RWF'."""
    sign = "-" if amount < 0 else ""
    magnitude = abs(amount)
    if magnitude == magnitude.to_integral_value():
        body = f"{magnitude:,.0f}"
    else:
        body = f"{magnitude:,.2f}"
    return f"{sign}{body} {currency}"
