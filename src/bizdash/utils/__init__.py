"""Utility functions for bizdash."""

from bizdash.utils.date_parser import (
    parse_date,
    parse_datetime,
    parse_month,
    parse_time,
    resolve_timezone,
)
from bizdash.utils.amount_parser import parse_amount

__all__ = [
    "parse_date",
    "parse_datetime",
    "parse_month",
    "parse_time",
    "resolve_timezone",
    "parse_amount",
]
