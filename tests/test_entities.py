"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date, datetime, time

from dateutil import tz

from bizdash.domain.entities import (
    Appointment,
    BusinessException,
    BusinessHours,
    Client,
    EntryType,
    FinancialEntry,
    Product,
    Recurrence,
)


class TestClient:
    """Tests for Client entity."""

    def test_create_client(self):
        client = Client(id=1, owner_id="owner-a", name="Ana Silva", phone="912345678")
        assert client.name == "Ana Silva"
        assert client.email is None

    def test_client_immutability(self):
        """Test that Client entities are immutable."""
        client = Client(id=1, owner_id="owner-a", name="Ana Silva")
        with pytest.raises(FrozenInstanceError):
            client.name = "New Name"

    def test_client_equality(self):
        assert Client(id=1, owner_id="o", name="A") == Client(id=1, owner_id="o", name="A")
        assert Client(id=1, owner_id="o", name="A") != Client(id=2, owner_id="o", name="A")


class TestProduct:
    """Tests for Product entity."""

    def test_low_stock_boundary(self):
        """Five units is low stock, six is not."""
        low = Product(id=1, owner_id="o", name="Shampoo", price=1490, quantity=5)
        fine = Product(id=2, owner_id="o", name="Conditioner", price=1290, quantity=6)
        assert low.is_low_stock
        assert not fine.is_low_stock

    def test_default_quantity(self):
        product = Product(id=1, owner_id="o", name="Comb", price=300)
        assert product.quantity == 0
        assert product.is_low_stock


class TestAppointment:
    """Tests for Appointment entity."""

    def test_ends_one_hour_later(self):
        start = datetime(2024, 3, 1, 10, 0, tzinfo=tz.UTC)
        appointment = Appointment(
            id=1,
            owner_id="o",
            client_id=1,
            service="Haircut",
            price=2500,
            professional_id=1,
            scheduled_at=start,
        )
        assert appointment.ends_at == datetime(2024, 3, 1, 11, 0, tzinfo=tz.UTC)
        assert appointment.is_confirmed is False


class TestFinancialEntry:
    """Tests for FinancialEntry entity."""

    def test_defaults_to_one_off(self):
        entry = FinancialEntry(
            id=1,
            owner_id="o",
            description="Rent",
            amount=65000,
            entry_type=EntryType.EXPENSE,
            entry_date=date(2024, 3, 1),
        )
        assert entry.recurrence is Recurrence.ONE_OFF

    def test_enum_values_are_strings(self):
        assert EntryType("revenue") is EntryType.REVENUE
        assert Recurrence.FIXED == "fixed"


class TestOpeningHours:
    """Tests for BusinessHours and BusinessException."""

    def test_hours_closed_without_times(self):
        assert BusinessHours(owner_id="o", day_of_week=0).is_closed
        assert not BusinessHours(
            owner_id="o", day_of_week=1, start_time=time(9), end_time=time(18)
        ).is_closed

    def test_exception_closed_all_day(self):
        holiday = BusinessException(
            id=1, owner_id="o", exception_date=date(2024, 12, 25), description="Christmas"
        )
        short_day = BusinessException(
            id=2,
            owner_id="o",
            exception_date=date(2024, 12, 24),
            description="Christmas Eve",
            start_time=time(9),
            end_time=time(13),
        )
        assert holiday.is_closed_all_day
        assert not short_day.is_closed_all_day
