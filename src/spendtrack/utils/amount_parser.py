"""Amount parsing utilities."""

from decimal import Decimal
import re

AMOUNT_PATTERN = re.compile(r"[+-]?\d+(?:[.,]\d+)?")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "123,45"
    - "-123,45"
    - "+ 8.63"
    - "12" (no fractional part)

    Args:
        amount_str: Amount string, using either comma or dot as the
            decimal separator

    Returns:
        Decimal amount, sign preserved

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Bank exports put a space between the sign and the digits
    cleaned = re.sub(r"\s", "", amount_str)

    # Plain decimal text only, no exponent notation
    if not AMOUNT_PATTERN.fullmatch(cleaned):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return Decimal(cleaned.replace(",", "."))


def parse_magnitude(amount_str: str) -> Decimal:
    """Parse an amount string and drop its sign.

    Expenses are stored as positive magnitudes.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    return abs(parse_amount(amount_str))


def format_amount(amount: Decimal) -> str:
    """Render a Decimal as plain dot-separated text (no exponent)."""
    return format(amount, "f")
