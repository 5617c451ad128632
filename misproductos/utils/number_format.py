"""Number parsing utilities for prices and free-form config values."""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Optional

AR_NUMBER_PATTERN = re.compile(r"^-?(?:\d{1,3}(?:\.\d{3})+|\d+)(?:,\d+)?$")

ZERO = Decimal('0')


def parse_ar_number(value: str) -> Decimal:
    """
    Parse a number string in Argentine format (e.g., 1.234,56 or 1.234,5) to Decimal.

    Falls back to the plain dotted format (1234.56) for values typed by
    machines rather than people.

    Raises:
        ValueError: if the value is invalid or empty.
    """
    if value is None:
        raise ValueError('Formato inválido. Usá 1.234,56 o 1.234')

    cleaned = value.strip()
    if not cleaned:
        raise ValueError('Formato inválido. Usá 1.234,56 o 1.234')

    # Try to match AR format (with or without decimals)
    if AR_NUMBER_PATTERN.match(cleaned):
        normalized = cleaned.replace('.', '').replace(',', '.')
    else:
        # Regular dotted number (backwards compatibility)
        normalized = cleaned.replace(',', '.')

    try:
        decimal_value = Decimal(normalized)
    except (InvalidOperation, ValueError):
        raise ValueError('Formato inválido. Usá 1.234,56 o 1.234')

    if not decimal_value.is_finite():
        raise ValueError('Formato inválido. Usá 1.234,56 o 1.234')

    return decimal_value


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convert prices, quantities and config values to Decimal without raising.

    Floats go through str() so 0.1 stays 0.1. Booleans, None, NaN and
    anything unparseable return ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    if isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return default
        return result if result.is_finite() else default
    if isinstance(value, str):
        try:
            return parse_ar_number(value)
        except ValueError:
            return default
    return default


def to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Integer view of ``to_decimal`` (truncates), or ``default`` when missing."""
    if value is None or isinstance(value, bool):
        return default
    number = to_decimal(value, default=None)
    if number is None:
        return default
    return int(number)


def round_half_up(value: Decimal, decimals: int = 2) -> Decimal:
    """Round to ``decimals`` places, ties away from zero (0.125 -> 0.13)."""
    with localcontext() as ctx:
        # quantize needs room for every digit of the result
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def plain_number(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros: 20.00 -> '20', 12.50 -> '12.5'."""
    if value == value.to_integral_value():
        return format(value.to_integral_value(), 'f')
    return format(value.normalize(), 'f')
