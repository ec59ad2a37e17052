"""Runtime configuration read from BIZDASH_* environment variables."""

import os
from dataclasses import dataclass, replace
from datetime import tzinfo
from typing import Mapping, Optional

from bizdash.domain.entities import LOW_STOCK_THRESHOLD
from bizdash.domain.errors import ValidationError
from bizdash.domain.money import DEFAULT_FORMAT, CurrencyFormat
from bizdash.utils.date_parser import resolve_timezone


@dataclass(frozen=True)
class Settings:
    """Settings for one bizdash session.

    ``timezone`` is the business timezone used to decide which calendar day
    an appointment falls on; it defaults to UTC when unset.
    """

    database_path: Optional[str] = None
    owner_id: Optional[str] = None
    timezone: str = "UTC"
    low_stock_threshold: int = LOW_STOCK_THRESHOLD
    currency: CurrencyFormat = DEFAULT_FORMAT

    @property
    def zone(self) -> tzinfo:
        try:
            return resolve_timezone(self.timezone)
        except ValueError as e:
            raise ValidationError(str(e))


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number, got '{raw}'")


def load_settings(
    environ: Optional[Mapping[str, str]] = None, **overrides
) -> Settings:
    """Build settings from the environment.

    Keyword overrides (e.g. values from CLI options) win over the
    environment when they are not None.
    """
    environ = os.environ if environ is None else environ

    currency = CurrencyFormat(
        symbol=environ.get("BIZDASH_CURRENCY_SYMBOL", DEFAULT_FORMAT.symbol),
        decimal_separator=environ.get(
            "BIZDASH_DECIMAL_SEPARATOR", DEFAULT_FORMAT.decimal_separator
        ),
        group_separator=environ.get("BIZDASH_GROUP_SEPARATOR", DEFAULT_FORMAT.group_separator),
        symbol_first=environ.get("BIZDASH_SYMBOL_FIRST", "").lower() in ("1", "true", "yes"),
    )
    if currency.decimal_separator == currency.group_separator:
        raise ValidationError("Decimal and group separators must differ")

    settings = Settings(
        database_path=environ.get("BIZDASH_DB_PATH") or None,
        owner_id=environ.get("BIZDASH_OWNER") or None,
        timezone=environ.get("BIZDASH_TIMEZONE") or "UTC",
        low_stock_threshold=_int_setting(
            environ, "BIZDASH_LOW_STOCK_THRESHOLD", LOW_STOCK_THRESHOLD
        ),
        currency=currency,
    )
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})
