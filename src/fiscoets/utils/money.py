"""Amount parsing and rounding utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")
THOUSANDS_DOTS = re.compile(r"-?[1-9]\d{0,2}(\.\d{3})+")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "€123.45", "123,45 €"
    - "1.234,56" (Italian thousands and decimal separators)
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    When both separators appear, the rightmost one is the decimal
    separator. A lone comma is always a decimal comma. Dots grouping
    digits in threes, as in "1.234" or "1.234.567", are Italian thousands
    separators.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and inner spaces
    amount_str = re.sub(r"[$€£¥\s]", "", amount_str)
    amount_str = re.sub(r"(?i)eur$", "", amount_str)

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        amount_str = amount_str.replace(",", ".")
    elif THOUSANDS_DOTS.fullmatch(amount_str):
        amount_str = amount_str.replace(".", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return amount


def round_euro(amount: Decimal) -> Decimal:
    """Round to euro cents, half up. For display and storage only."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_euro(amount: Decimal) -> str:
    """Format an amount the Italian way, e.g. "€ 1.234,56"."""
    rounded = round_euro(amount)
    text = f"{abs(rounded):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if rounded < 0 else ""
    return f"{sign}€ {text}"
