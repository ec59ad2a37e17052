"""Tests for the SQLAlchemy sync gateway and its mappers."""

import threading
from datetime import date, datetime, time

import pytest
from dateutil import tz

from bizdash.domain.errors import RemoteError
from bizdash.gateway.base import (
    APPOINTMENTS,
    BUSINESS_HOURS,
    CLIENTS,
    FINANCIAL_ENTRIES,
    PRODUCTS,
)
from bizdash.gateway.mappers import record_to_columns, row_to_record
from bizdash.gateway.models import Appointment as ORMAppointment
from bizdash.gateway.models import Client as ORMClient

from conftest import OTHER_OWNER, OWNER, run


class TestMappers:
    """Tests for record/row conversion."""

    def test_row_to_record_makes_instants_aware(self):
        row = ORMAppointment(
            id=1,
            owner_id=OWNER,
            client_id=1,
            service="Haircut",
            price=2500,
            professional_id=1,
            scheduled_at=datetime(2024, 3, 1, 10, 0),
            is_confirmed=False,
        )
        record = row_to_record(row)
        assert record["scheduled_at"] == datetime(2024, 3, 1, 10, 0, tzinfo=tz.UTC)
        assert record["owner_id"] == OWNER

    def test_record_to_columns_stores_naive_utc(self):
        lisbon_summer = datetime(2024, 7, 1, 10, 0, tzinfo=tz.gettz("Europe/Lisbon"))
        columns = record_to_columns(ORMAppointment, {"scheduled_at": lisbon_summer})
        assert columns["scheduled_at"] == datetime(2024, 7, 1, 9, 0)

    @pytest.mark.parametrize("field", ["id", "owner_id", "created_at", "colour"])
    def test_record_to_columns_rejects_protected_and_unknown(self, field):
        with pytest.raises(RemoteError, match=field):
            record_to_columns(ORMClient, {field: "x"})


class TestSQLAlchemyGateway:
    """Tests for gateway operations against a temporary database."""

    def test_insert_returns_generated_id(self, temp_gateway):
        record = run(temp_gateway.insert(CLIENTS, OWNER, {"name": "Ana"}))
        assert isinstance(record["id"], int)
        assert record["owner_id"] == OWNER
        assert record["name"] == "Ana"

    def test_select_is_owner_scoped(self, temp_gateway):
        run(temp_gateway.insert(CLIENTS, OWNER, {"name": "Ana"}))
        run(temp_gateway.insert(CLIENTS, OTHER_OWNER, {"name": "Bruno"}))

        mine = run(temp_gateway.select(CLIENTS, OWNER))
        theirs = run(temp_gateway.select(CLIENTS, OTHER_OWNER))

        assert [r["name"] for r in mine] == ["Ana"]
        assert [r["name"] for r in theirs] == ["Bruno"]

    def test_select_ordering(self, temp_gateway):
        for day in (3, 1, 2):
            run(
                temp_gateway.insert(
                    FINANCIAL_ENTRIES,
                    OWNER,
                    {
                        "description": f"Day {day}",
                        "amount": 100,
                        "entry_type": "revenue",
                        "entry_date": date(2024, 3, day),
                    },
                )
            )
        records = run(
            temp_gateway.select(FINANCIAL_ENTRIES, OWNER, order_by="entry_date", descending=True)
        )
        assert [r["entry_date"].day for r in records] == [3, 2, 1]
        assert records[0]["recurrence"] == "one_off"

    def test_select_unknown_order_column(self, temp_gateway):
        with pytest.raises(RemoteError, match="cannot be ordered"):
            run(temp_gateway.select(CLIENTS, OWNER, order_by="colour"))

    def test_unknown_collection(self, temp_gateway):
        with pytest.raises(RemoteError, match="Unknown collection"):
            run(temp_gateway.select("invoices", OWNER))

    def test_unscoped_request_refused(self, temp_gateway):
        with pytest.raises(RemoteError, match="unscoped"):
            run(temp_gateway.select(CLIENTS, ""))
        with pytest.raises(RemoteError, match="unscoped"):
            run(temp_gateway.insert(CLIENTS, "", {"name": "Ana"}))

    def test_update_and_delete(self, temp_gateway):
        record = run(temp_gateway.insert(CLIENTS, OWNER, {"name": "Ana"}))

        updated = run(temp_gateway.update(CLIENTS, OWNER, record["id"], {"name": "Ana Silva"}))
        assert updated["name"] == "Ana Silva"
        assert updated["id"] == record["id"]

        run(temp_gateway.delete(CLIENTS, OWNER, record["id"]))
        assert run(temp_gateway.select(CLIENTS, OWNER)) == []

    def test_other_owner_cannot_touch_record(self, temp_gateway):
        record = run(temp_gateway.insert(CLIENTS, OWNER, {"name": "Ana"}))

        with pytest.raises(RemoteError, match="does not exist"):
            run(temp_gateway.update(CLIENTS, OTHER_OWNER, record["id"], {"name": "Mine now"}))
        with pytest.raises(RemoteError, match="does not exist"):
            run(temp_gateway.delete(CLIENTS, OTHER_OWNER, record["id"]))

        assert run(temp_gateway.select(CLIENTS, OWNER))[0]["name"] == "Ana"

    def test_missing_required_column_fails_cleanly(self, temp_gateway):
        with pytest.raises(RemoteError, match="Could not insert"):
            run(temp_gateway.insert(CLIENTS, OWNER, {"phone": "912345678"}))
        # Session is usable after the rollback
        assert run(temp_gateway.select(CLIENTS, OWNER)) == []

    def test_business_hours_unique_per_day(self, temp_gateway):
        values = {"day_of_week": 1, "start_time": time(9), "end_time": time(18)}
        run(temp_gateway.insert(BUSINESS_HOURS, OWNER, values))
        run(temp_gateway.insert(BUSINESS_HOURS, OTHER_OWNER, values))

        with pytest.raises(RemoteError):
            run(temp_gateway.insert(BUSINESS_HOURS, OWNER, values))

    def test_appointment_instant_round_trip(self, temp_gateway):
        at = datetime(2024, 3, 1, 14, 30, tzinfo=tz.gettz("America/New_York"))
        record = run(
            temp_gateway.insert(
                APPOINTMENTS,
                OWNER,
                {
                    "client_id": 1,
                    "service": "Haircut",
                    "price": 2500,
                    "professional_id": 1,
                    "scheduled_at": at,
                    "is_confirmed": False,
                },
            )
        )
        assert record["scheduled_at"] == at
        assert record["scheduled_at"].tzinfo is tz.UTC

    def test_driver_overflow_is_remote_error(self, temp_gateway):
        too_big = {"name": "Gold", "price": 2**70, "quantity": 0}
        with pytest.raises(RemoteError, match="Could not insert"):
            run(temp_gateway.insert(PRODUCTS, OWNER, too_big))

        record = run(temp_gateway.insert(PRODUCTS, OWNER, {"name": "Gold", "price": 100}))
        with pytest.raises(RemoteError, match="Could not update"):
            run(temp_gateway.update(PRODUCTS, OWNER, record["id"], {"price": 2**70}))
        # Rolled back; later calls still work
        assert [r["price"] for r in run(temp_gateway.select(PRODUCTS, OWNER))] == [100]

    def test_session_work_runs_off_the_event_loop(self, temp_gateway, monkeypatch):
        threads = []
        factory = temp_gateway.session_factory

        def recording_factory():
            threads.append(threading.get_ident())
            return factory()

        monkeypatch.setattr(temp_gateway, "session_factory", recording_factory)
        run(temp_gateway.insert(CLIENTS, OWNER, {"name": "Ana"}))
        run(temp_gateway.select(CLIENTS, OWNER))

        assert len(threads) == 2
        assert threading.get_ident() not in threads
