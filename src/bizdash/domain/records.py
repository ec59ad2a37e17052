"""Parse gateway records into domain entities.

Every record coming back from the sync gateway passes through one of the
``parse_*`` functions before it reaches a snapshot. A record missing a
required field, carrying the wrong type, or holding a float where minor
units are expected is rejected with ``RemoteError``.
"""

from datetime import date, datetime, time
from typing import Any, Optional

from dateutil import tz

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
from bizdash.domain.errors import RemoteError, malformed_record

Record = dict[str, Any]


class _Reader:
    """Typed field access on one record, failing with RemoteError."""

    def __init__(self, collection: str, record: Any):
        if not isinstance(record, dict):
            raise RemoteError(f"Malformed {collection} response: expected a record")
        self.collection = collection
        self.record = record

    def fail(self, field: str) -> RemoteError:
        return RemoteError(malformed_record(self.collection, field, self.record))

    def identifier(self, field: str = "id") -> int:
        value = self.record.get(field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise self.fail(field)
        return value

    def text(self, field: str) -> str:
        value = self.record.get(field)
        if not isinstance(value, str) or not value:
            raise self.fail(field)
        return value

    def optional_text(self, field: str) -> Optional[str]:
        value = self.record.get(field)
        if value is not None and not isinstance(value, str):
            raise self.fail(field)
        return value

    def integer(self, field: str) -> int:
        value = self.record.get(field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise self.fail(field)
        return value

    # Money must arrive as integer minor units; floats are rejected
    minor_units = integer

    def boolean(self, field: str) -> bool:
        value = self.record.get(field)
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise self.fail(field)

    def day(self, field: str) -> date:
        value = self.record.get(field)
        if isinstance(value, datetime):
            raise self.fail(field)
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
        raise self.fail(field)

    def instant(self, field: str) -> datetime:
        value = self.record.get(field)
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise self.fail(field)
        if not isinstance(value, datetime):
            raise self.fail(field)
        # Stored instants without an offset are UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz.UTC)
        return value

    def optional_time(self, field: str) -> Optional[time]:
        value = self.record.get(field)
        if value is None or isinstance(value, time):
            return value
        if isinstance(value, str):
            if not value:
                return None
            try:
                return time.fromisoformat(value)
            except ValueError:
                pass
        raise self.fail(field)

    def choice(self, field: str, enum_type):
        try:
            return enum_type(self.record.get(field))
        except ValueError:
            raise self.fail(field)


def parse_client(record: Record) -> Client:
    r = _Reader("clients", record)
    return Client(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        name=r.text("name"),
        phone=r.optional_text("phone"),
        email=r.optional_text("email"),
        notes=r.optional_text("notes"),
    )


def parse_product(record: Record) -> Product:
    r = _Reader("products", record)
    quantity = r.integer("quantity") if record.get("quantity") is not None else 0
    return Product(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        name=r.text("name"),
        price=r.minor_units("price"),
        quantity=quantity,
        description=r.optional_text("description"),
        image_url=r.optional_text("image_url"),
    )


def parse_professional(record: Record) -> Professional:
    r = _Reader("professionals", record)
    return Professional(id=r.identifier(), owner_id=r.text("owner_id"), name=r.text("name"))


def parse_appointment(record: Record) -> Appointment:
    r = _Reader("appointments", record)
    return Appointment(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        client_id=r.identifier("client_id"),
        service=r.text("service"),
        price=r.minor_units("price"),
        professional_id=r.identifier("professional_id"),
        scheduled_at=r.instant("scheduled_at"),
        is_confirmed=r.boolean("is_confirmed"),
    )


def parse_financial_entry(record: Record) -> FinancialEntry:
    r = _Reader("financial_entries", record)
    return FinancialEntry(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        description=r.text("description"),
        amount=r.minor_units("amount"),
        entry_type=r.choice("entry_type", EntryType),
        entry_date=r.day("entry_date"),
        recurrence=r.choice("recurrence", Recurrence),
    )


def parse_business_hours(record: Record) -> BusinessHours:
    r = _Reader("business_hours", record)
    day = r.identifier("day_of_week")
    if not 0 <= day <= 6:
        raise r.fail("day_of_week")
    return BusinessHours(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        day_of_week=day,
        start_time=r.optional_time("start_time"),
        end_time=r.optional_time("end_time"),
    )


def parse_business_exception(record: Record) -> BusinessException:
    r = _Reader("business_exceptions", record)
    return BusinessException(
        id=r.identifier(),
        owner_id=r.text("owner_id"),
        exception_date=r.day("exception_date"),
        description=r.text("description"),
        start_time=r.optional_time("start_time"),
        end_time=r.optional_time("end_time"),
    )
