"""Money conversion between integer minor units and display values.

Every monetary value in bizdash is an ``int`` count of minor units (cents).
There is exactly one rounding point: :func:`from_user_input`, where a decimal
typed by a person is scaled and rounded half away from zero. Sums, averages
and differences after that are integer arithmetic, and :func:`to_display`
formats with ``divmod`` so no float is ever involved.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from bizdash.domain.errors import InvalidAmount, invalid_amount
from bizdash.utils.amount_parser import parse_amount

AmountInput = Union[int, float, Decimal, str]

# Largest magnitude a signed 64-bit integer column can hold
MAX_MINOR_UNITS = 2**63 - 1


@dataclass(frozen=True)
class CurrencyFormat:
    """Currency and locale conventions used for display and parsing."""

    symbol: str = "€"
    decimal_separator: str = ","
    group_separator: str = "."
    symbol_first: bool = False
    scale: int = 100

    @property
    def decimal_places(self) -> int:
        return len(str(self.scale)) - 1


DEFAULT_FORMAT = CurrencyFormat()


def to_display(minor_units: int, fmt: CurrencyFormat = DEFAULT_FORMAT) -> str:
    """Format minor units for display, e.g. ``1050`` -> ``"10,50 €"``.

    Negative values are rendered with a leading minus sign.
    """
    sign = "-" if minor_units < 0 else ""
    major, minor = divmod(abs(int(minor_units)), fmt.scale)
    number = f"{major:,}".replace(",", fmt.group_separator)
    if fmt.decimal_places:
        number = f"{number}{fmt.decimal_separator}{minor:0{fmt.decimal_places}d}"
    if fmt.symbol_first:
        return f"{sign}{fmt.symbol}{number}"
    return f"{sign}{number} {fmt.symbol}"


def to_decimal(minor_units: int, fmt: CurrencyFormat = DEFAULT_FORMAT) -> Decimal:
    """Exact decimal value of ``minor_units`` (for prefilling edit forms)."""
    return Decimal(int(minor_units)) / Decimal(fmt.scale)


def parse_display(text: str, fmt: CurrencyFormat = DEFAULT_FORMAT) -> Decimal:
    """Parse a string produced by :func:`to_display` back into a Decimal."""
    return parse_amount(
        text,
        decimal_separator=fmt.decimal_separator,
        group_separator=fmt.group_separator,
        symbol=fmt.symbol,
    )


def from_user_input(
    value: AmountInput,
    *,
    require_positive: bool = True,
    fmt: CurrencyFormat = DEFAULT_FORMAT,
) -> int:
    """Convert a user-entered decimal amount to integer minor units.

    Floats go through their shortest ``repr`` so ``10.505`` is treated as
    the decimal the user typed, not its binary approximation. Strings are
    parsed with the separators of ``fmt``.

    Raises:
        InvalidAmount: If the value is not a finite number, cannot be parsed,
            is too large to store, or is not positive while
            ``require_positive`` is set.
    """
    if isinstance(value, bool):
        raise InvalidAmount(invalid_amount(value, "not a number"))

    if isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, (int, Decimal)):
        amount = Decimal(value)
    elif isinstance(value, str):
        try:
            amount = parse_display(value, fmt)
        except ValueError as e:
            raise InvalidAmount(invalid_amount(value, str(e))) from e
    else:
        raise InvalidAmount(invalid_amount(value, "not a number"))

    if not amount.is_finite():
        raise InvalidAmount(invalid_amount(value, "not a finite number"))

    try:
        scaled = (amount * fmt.scale).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidAmount(invalid_amount(value, "too large")) from e
    minor_units = int(scaled)
    if abs(minor_units) > MAX_MINOR_UNITS:
        raise InvalidAmount(invalid_amount(value, "too large"))

    if require_positive and minor_units <= 0:
        raise InvalidAmount(invalid_amount(value, "must be greater than zero"))
    return minor_units


def require_minor_units(value: object, *, require_positive: bool = True) -> int:
    """Check that an already-converted monetary value is a proper int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(invalid_amount(value, "minor units must be an integer"))
    if abs(value) > MAX_MINOR_UNITS:
        raise InvalidAmount(invalid_amount(value, "too large"))
    if require_positive and value <= 0:
        raise InvalidAmount(invalid_amount(value, "must be greater than zero"))
    return value


def divide_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded to nearest, halves away from zero."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    quotient, remainder = divmod(abs(numerator), denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return quotient if numerator >= 0 else -quotient
