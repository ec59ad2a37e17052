"""Tests for parsing gateway records into entities."""

import pytest
from datetime import date, datetime, time

from dateutil import tz

from bizdash.domain.entities import EntryType, Recurrence
from bizdash.domain.errors import RemoteError
from bizdash.domain.records import (
    parse_appointment,
    parse_business_exception,
    parse_business_hours,
    parse_client,
    parse_financial_entry,
    parse_product,
)


def appointment_record(**overrides):
    record = {
        "id": 7,
        "owner_id": "owner-a",
        "client_id": 1,
        "service": "Haircut",
        "price": 2500,
        "professional_id": 2,
        "scheduled_at": "2024-03-01T10:00:00",
        "is_confirmed": 0,
    }
    record.update(overrides)
    return record


def test_parse_client_ignores_bookkeeping_columns():
    client = parse_client(
        {
            "id": 1,
            "owner_id": "owner-a",
            "name": "Ana",
            "phone": None,
            "email": None,
            "notes": None,
            "created_at": datetime(2024, 1, 1),
        }
    )
    assert client.name == "Ana"


def test_parse_product_missing_quantity_is_zero():
    product = parse_product(
        {"id": 1, "owner_id": "owner-a", "name": "Shampoo", "price": 1490, "quantity": None}
    )
    assert product.quantity == 0


def test_parse_product_rejects_float_price():
    with pytest.raises(RemoteError, match="price"):
        parse_product({"id": 1, "owner_id": "owner-a", "name": "Shampoo", "price": 14.9})


def test_parse_appointment_naive_instant_is_utc():
    appointment = parse_appointment(appointment_record())
    assert appointment.scheduled_at == datetime(2024, 3, 1, 10, 0, tzinfo=tz.UTC)
    assert appointment.is_confirmed is False


def test_parse_appointment_keeps_offset():
    appointment = parse_appointment(
        appointment_record(scheduled_at="2024-03-01T10:00:00+01:00", is_confirmed=True)
    )
    assert appointment.scheduled_at.astimezone(tz.UTC).hour == 9
    assert appointment.is_confirmed is True


@pytest.mark.parametrize(
    "field,value",
    [
        ("id", None),
        ("id", "7"),
        ("owner_id", ""),
        ("client_id", None),
        ("service", None),
        ("scheduled_at", "first of March"),
        ("is_confirmed", "yes"),
        ("price", "25.00"),
    ],
)
def test_parse_appointment_malformed(field, value):
    with pytest.raises(RemoteError, match=field):
        parse_appointment(appointment_record(**{field: value}))


def test_parse_financial_entry():
    entry = parse_financial_entry(
        {
            "id": 3,
            "owner_id": "owner-a",
            "description": "Rent",
            "amount": 65000,
            "entry_type": "expense",
            "entry_date": "2024-03-01",
            "recurrence": "fixed",
        }
    )
    assert entry.entry_type is EntryType.EXPENSE
    assert entry.recurrence is Recurrence.FIXED
    assert entry.entry_date == date(2024, 3, 1)


def test_parse_financial_entry_unknown_type():
    with pytest.raises(RemoteError, match="entry_type"):
        parse_financial_entry(
            {
                "id": 3,
                "owner_id": "owner-a",
                "description": "Rent",
                "amount": 65000,
                "entry_type": "transfer",
                "entry_date": "2024-03-01",
                "recurrence": "fixed",
            }
        )


def test_parse_business_hours():
    hours = parse_business_hours(
        {
            "id": 1,
            "owner_id": "owner-a",
            "day_of_week": 1,
            "start_time": "09:00:00",
            "end_time": time(18, 0),
        }
    )
    assert hours.start_time == time(9, 0)
    assert hours.end_time == time(18, 0)


def test_parse_business_hours_day_out_of_range():
    with pytest.raises(RemoteError, match="day_of_week"):
        parse_business_hours({"id": 1, "owner_id": "owner-a", "day_of_week": 7})


def test_parse_business_exception_closed():
    exception = parse_business_exception(
        {
            "id": 1,
            "owner_id": "owner-a",
            "exception_date": date(2024, 12, 25),
            "description": "Christmas",
            "start_time": None,
            "end_time": "",
        }
    )
    assert exception.is_closed_all_day


def test_non_dict_record():
    with pytest.raises(RemoteError):
        parse_client(["not", "a", "record"])
