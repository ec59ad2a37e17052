"""Field validation for entity payloads.

``normalize_*`` functions take a form payload (plain mapping of user input)
and return the column values to send to the gateway, with monetary fields
converted to minor units. ``*_values`` functions re-validate an edited entity
before an update and return its patch.
"""

import re
from dataclasses import asdict
from datetime import date, datetime, time
from functools import partial
from typing import Any, Callable, Mapping, Optional

from bizdash.domain.entities import (
    Appointment,
    BusinessException,
    BusinessHours,
    Client,
    EntryType,
    FinancialEntry,
    Product,
    Professional,
    Recurrence,
)
from bizdash.domain.errors import ValidationError
from bizdash.domain.money import (
    DEFAULT_FORMAT,
    CurrencyFormat,
    from_user_input,
    require_minor_units,
)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_RE = re.compile(r"^https?://[^\s/]+\S*$")

Values = dict[str, Any]
MoneyCheck = Callable[[Any], int]


def _check_fields(payload: Mapping[str, Any], allowed: set[str], entity: str) -> None:
    unknown = sorted(set(payload) - allowed)
    if unknown:
        raise ValidationError(f"Unknown {entity} field(s): {', '.join(unknown)}")


def require_text(value: Any, field: str) -> str:
    """Return ``value`` stripped, rejecting missing or blank text."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def optional_text(value: Any, field: str) -> Optional[str]:
    """Return stripped text, or None for missing/blank values."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text")
    return value.strip() or None


def optional_email(value: Any) -> Optional[str]:
    email = optional_text(value, "email")
    if email is not None and not EMAIL_RE.match(email):
        raise ValidationError(f"Invalid email '{email}'")
    return email


def optional_url(value: Any, field: str) -> Optional[str]:
    url = optional_text(value, field)
    if url is not None and not URL_RE.match(url):
        raise ValidationError(f"{field} must be an http(s) URL")
    return url


def require_identifier(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a record identifier")
    return value


def require_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("quantity must be a whole number")
    if value < 0:
        raise ValidationError("quantity cannot be negative")
    return value


def require_aware_datetime(value: Any, field: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(f"{field} must be a date and time")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field} must carry a timezone")
    return value


def require_date(value: Any, field: str) -> date:
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError(f"{field} must be a calendar date")
    return value


def require_enum(value: Any, enum_type, field: str):
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ValidationError(f"{field} must be one of: {choices}")


def require_opening_times(
    start_time: Optional[time], end_time: Optional[time]
) -> tuple[Optional[time], Optional[time]]:
    """Check a start/end pair: both absent (closed) or start before end."""
    for value, field in ((start_time, "start_time"), (end_time, "end_time")):
        if value is not None and not isinstance(value, time):
            raise ValidationError(f"{field} must be a time of day")
    if (start_time is None) != (end_time is None):
        raise ValidationError("Give both start and end time, or neither for closed")
    if start_time is not None and start_time >= end_time:
        raise ValidationError("start_time must be before end_time")
    return start_time, end_time


def normalize_client(payload: Mapping[str, Any], fmt: CurrencyFormat = DEFAULT_FORMAT) -> Values:
    _check_fields(payload, {"name", "phone", "email", "notes"}, "client")
    return {
        "name": require_text(payload.get("name"), "name"),
        "phone": optional_text(payload.get("phone"), "phone"),
        "email": optional_email(payload.get("email")),
        "notes": optional_text(payload.get("notes"), "notes"),
    }


def normalize_product(
    payload: Mapping[str, Any],
    fmt: CurrencyFormat = DEFAULT_FORMAT,
    money: Optional[MoneyCheck] = None,
) -> Values:
    money = money or partial(from_user_input, fmt=fmt)
    _check_fields(
        payload, {"name", "description", "price", "quantity", "image_url"}, "product"
    )
    if payload.get("price") is None:
        raise ValidationError("price is required")
    return {
        "name": require_text(payload.get("name"), "name"),
        "description": optional_text(payload.get("description"), "description"),
        "price": money(payload["price"]),
        "quantity": require_quantity(payload.get("quantity", 0)),
        "image_url": optional_url(payload.get("image_url"), "image_url"),
    }


def normalize_professional(payload: Mapping[str, Any], fmt: CurrencyFormat = DEFAULT_FORMAT) -> Values:
    _check_fields(payload, {"name"}, "professional")
    return {"name": require_text(payload.get("name"), "name")}


def normalize_appointment(
    payload: Mapping[str, Any],
    fmt: CurrencyFormat = DEFAULT_FORMAT,
    money: Optional[MoneyCheck] = None,
) -> Values:
    money = money or partial(from_user_input, fmt=fmt)
    _check_fields(
        payload,
        {"client_id", "service", "price", "professional_id", "scheduled_at", "is_confirmed"},
        "appointment",
    )
    if payload.get("price") is None:
        raise ValidationError("price is required")
    is_confirmed = payload.get("is_confirmed", False)
    if not isinstance(is_confirmed, bool):
        raise ValidationError("is_confirmed must be true or false")
    return {
        "client_id": require_identifier(payload.get("client_id"), "client_id"),
        "service": require_text(payload.get("service"), "service"),
        "price": money(payload["price"]),
        "professional_id": require_identifier(
            payload.get("professional_id"), "professional_id"
        ),
        "scheduled_at": require_aware_datetime(payload.get("scheduled_at"), "scheduled_at"),
        "is_confirmed": is_confirmed,
    }


def normalize_financial_entry(
    payload: Mapping[str, Any],
    fmt: CurrencyFormat = DEFAULT_FORMAT,
    money: Optional[MoneyCheck] = None,
) -> Values:
    money = money or partial(from_user_input, fmt=fmt)
    _check_fields(
        payload,
        {"description", "amount", "entry_type", "recurrence", "entry_date"},
        "financial entry",
    )
    if payload.get("amount") is None:
        raise ValidationError("amount is required")
    return {
        "description": require_text(payload.get("description"), "description"),
        "amount": money(payload["amount"]),
        "entry_type": require_enum(payload.get("entry_type"), EntryType, "entry_type").value,
        "recurrence": require_enum(
            payload.get("recurrence", Recurrence.ONE_OFF), Recurrence, "recurrence"
        ).value,
        "entry_date": require_date(payload.get("entry_date"), "entry_date"),
    }


def normalize_business_exception(payload: Mapping[str, Any], fmt: CurrencyFormat = DEFAULT_FORMAT) -> Values:
    _check_fields(
        payload,
        {"exception_date", "description", "start_time", "end_time"},
        "business exception",
    )
    start_time, end_time = require_opening_times(
        payload.get("start_time"), payload.get("end_time")
    )
    return {
        "exception_date": require_date(payload.get("exception_date"), "exception_date"),
        "description": require_text(payload.get("description"), "description"),
        "start_time": start_time,
        "end_time": end_time,
    }


def _patch_from(entity) -> Values:
    values = asdict(entity)
    values.pop("id", None)
    values.pop("owner_id", None)
    return values


def client_values(client: Client) -> Values:
    return normalize_client(_patch_from(client))


def product_values(product: Product) -> Values:
    return normalize_product(_patch_from(product), money=require_minor_units)


def professional_values(professional: Professional) -> Values:
    return normalize_professional(_patch_from(professional))


def appointment_values(appointment: Appointment) -> Values:
    return normalize_appointment(_patch_from(appointment), money=require_minor_units)


def financial_entry_values(entry: FinancialEntry) -> Values:
    return normalize_financial_entry(_patch_from(entry), money=require_minor_units)


def business_exception_values(exception: BusinessException) -> Values:
    return normalize_business_exception(_patch_from(exception))


def business_hours_values(hours: BusinessHours) -> Values:
    day = hours.day_of_week
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
    start_time, end_time = require_opening_times(hours.start_time, hours.end_time)
    return {"day_of_week": day, "start_time": start_time, "end_time": end_time}
