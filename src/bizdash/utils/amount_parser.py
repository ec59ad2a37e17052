"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(
    amount_str: str,
    decimal_separator: str = ".",
    group_separator: str = ",",
    symbol: str = "",
) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats (shown with the default separators):
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "123.45 €"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    With ``decimal_separator=","`` and ``group_separator="."`` the same
    shapes are accepted in continental notation, e.g. "1.234,56 €".
    A group separator is only accepted between groups of three digits,
    so "10.50" is rejected there instead of being read as 1050.

    Args:
        amount_str: Amount string
        decimal_separator: Character separating the fractional part
        group_separator: Character grouping thousands
        symbol: Extra currency symbol to strip (e.g. "kr")

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

    # Remove currency symbols and every kind of space
    if symbol:
        amount_str = amount_str.replace(symbol, "")
    amount_str = re.sub(r"R\$|[$€£¥]|\s", "", amount_str)

    if group_separator and group_separator in amount_str:
        grouped = r"[+-]?\d{1,3}(?:%s\d{3})+(?:%s\d*)?" % (
            re.escape(group_separator),
            re.escape(decimal_separator),
        )
        if not re.fullmatch(grouped, amount_str):
            raise ValueError(f"Misplaced group separator in amount '{amount_str}'")
        amount_str = amount_str.replace(group_separator, "")
    if decimal_separator != ".":
        amount_str = amount_str.replace(decimal_separator, ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return amount
