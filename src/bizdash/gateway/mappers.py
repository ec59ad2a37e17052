"""Mapper functions to convert between SQLAlchemy rows and gateway records.

Records are plain dictionaries keyed by column name. Instants leave the
gateway timezone-aware (UTC) and are stored naive in UTC.
"""

from datetime import datetime
from typing import Any

from dateutil import tz
from sqlalchemy import DateTime

from bizdash.domain.errors import RemoteError
from bizdash.gateway.models import Base

Record = dict[str, Any]

# Columns a client may never set or change
PROTECTED_COLUMNS = frozenset({"id", "owner_id", "created_at", "updated_at"})


def row_to_record(row: Base) -> Record:
    """Convert a SQLAlchemy row into a gateway record."""
    record: Record = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=tz.UTC)
        record[column.key] = value
    return record


def record_to_columns(model: type[Base], values: Record) -> Record:
    """Validate incoming values against the model's writable columns.

    Raises:
        RemoteError: If a value targets an unknown or protected column
    """
    columns = {column.key: column for column in model.__table__.columns}
    result: Record = {}
    for key, value in values.items():
        if key in PROTECTED_COLUMNS or key not in columns:
            raise RemoteError(f"{model.__tablename__} rejects field '{key}'")
        if isinstance(columns[key].type, DateTime) and isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(tz.UTC).replace(tzinfo=None)
        result[key] = value
    return result
