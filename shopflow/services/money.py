"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Prices arrive
from the listing side as display strings ("$10.00") and are parsed once,
at ingestion.
"""
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from shopflow.errors import InvalidPriceError

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal]

# Leading currency symbol: anything that is not a digit, sign, dot or space.
# Commas are only accepted as thousands separators ("1,299.99").
_PRICE_RE = re.compile(
    r"^\s*(?P<symbol>[^\d\s.+-]*)\s*"
    r"(?P<amount>[+-]?(?:(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?|\.\d+))\s*$"
)


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_price(price: str) -> Decimal:
    """
    Parse a display price such as "$10.00" into a Decimal.

    The leading currency symbol is stripped; comma group separators are
    allowed ("$1,299.99").

    Raises:
        InvalidPriceError: if the text is not a symbol followed by a
            non-negative finite number.
    """
    if not isinstance(price, str):
        raise InvalidPriceError(f"price must be a string, got {type(price).__name__}")

    match = _PRICE_RE.match(price)
    if not match:
        raise InvalidPriceError(f"malformed price: {price!r}")

    amount_text = match.group("amount").replace(",", "")
    try:
        amount = Decimal(amount_text)
    except InvalidOperation:
        raise InvalidPriceError(f"malformed price: {price!r}") from None

    if not amount.is_finite() or amount < 0:
        raise InvalidPriceError(f"price must be a non-negative number: {price!r}")
    return amount


def round_money(value: Number) -> Decimal:
    """Round a monetary value half-up to 2 decimal places."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, symbol: str = "$") -> str:
    """
    Format monetary value with a leading currency symbol.

    >>> format_money(Decimal("25.5"))
    '$25.50'
    """
    return f"{symbol}{round_money(value):.2f}"


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
