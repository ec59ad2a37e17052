"""SQLAlchemy models for the bizdash backing store.

Every table carries an ``owner_id`` column. Monetary columns are Integer
minor units; instants are stored as naive UTC.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Time,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Product(Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Professional(Base):
    """Professional model."""

    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Appointment(Base):
    """Appointment model.

    Client and professional are referenced by id without foreign keys, so
    deleting either leaves the reference dangling.
    """

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    client_id = Column(Integer, nullable=False)
    service = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    professional_id = Column(Integer, nullable=False)
    scheduled_at = Column(DateTime, nullable=False)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class FinancialEntry(Base):
    """Financial entry model."""

    __tablename__ = "financial_entries"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    entry_type = Column(String, nullable=False)
    recurrence = Column(String, default="one_off", nullable=False)
    entry_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class BusinessHours(Base):
    """Opening hours for one weekday of one owner."""

    __tablename__ = "business_hours"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)

    __table_args__ = (UniqueConstraint("owner_id", "day_of_week", name="uq_owner_day"),)


class BusinessException(Base):
    """Single-date override of the opening hours."""

    __tablename__ = "business_exceptions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    exception_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    description = Column(String, nullable=False)


MODELS = {
    model.__tablename__: model
    for model in (
        Client,
        Product,
        Professional,
        Appointment,
        FinancialEntry,
        BusinessHours,
        BusinessException,
    )
}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Gateway calls run in worker threads
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
