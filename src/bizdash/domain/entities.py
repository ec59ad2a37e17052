"""Domain model entities for bizdash.

These are pure data classes representing business concepts, independent of
the persistence schema. Monetary fields always hold integer minor units
(cents); they are never floats.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

# Products at or below this quantity are reported as low stock.
LOW_STOCK_THRESHOLD = 5

# Appointments have no duration field; calendars assume one hour.
APPOINTMENT_DURATION = timedelta(hours=1)


class EntryType(str, Enum):
    """Direction of a financial entry."""

    REVENUE = "revenue"
    EXPENSE = "expense"


class Recurrence(str, Enum):
    """Whether a financial entry happens once or is a fixed cost/income."""

    ONE_OFF = "one_off"
    FIXED = "fixed"


@dataclass(frozen=True)
class Client:
    """Client record."""

    id: int
    owner_id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Product:
    """Inventory product. ``price`` is in minor units."""

    id: int
    owner_id: str
    name: str
    price: int
    quantity: int = 0
    description: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= LOW_STOCK_THRESHOLD


@dataclass(frozen=True)
class Professional:
    """Staff member who performs services."""

    id: int
    owner_id: str
    name: str


@dataclass(frozen=True)
class Appointment:
    """Scheduled service for a client.

    ``scheduled_at`` is a timezone-aware instant; ``price`` is in minor units.
    """

    id: int
    owner_id: str
    client_id: int
    service: str
    price: int
    professional_id: int
    scheduled_at: datetime
    is_confirmed: bool = False

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + APPOINTMENT_DURATION


@dataclass(frozen=True)
class FinancialEntry:
    """Revenue or expense line. ``amount`` is positive, in minor units."""

    id: int
    owner_id: str
    description: str
    amount: int
    entry_type: EntryType
    entry_date: date
    recurrence: Recurrence = Recurrence.ONE_OFF


@dataclass(frozen=True)
class BusinessHours:
    """Opening hours for one weekday (0 = Sunday ... 6 = Saturday)."""

    owner_id: str
    day_of_week: int
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    id: Optional[int] = None

    @property
    def is_closed(self) -> bool:
        return self.start_time is None and self.end_time is None


@dataclass(frozen=True)
class BusinessException:
    """Override of the regular hours for a single calendar date."""

    id: int
    owner_id: str
    exception_date: date
    description: str
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def is_closed_all_day(self) -> bool:
        return self.start_time is None and self.end_time is None


@dataclass(frozen=True)
class DailyKPIs:
    """Headline numbers for one day of appointments."""

    earnings_minor: int
    appointment_count: int
    avg_ticket_minor: int


@dataclass(frozen=True)
class DailyEarnings:
    """Revenue total for one calendar date."""

    date: date
    earnings_minor: int


@dataclass(frozen=True)
class MonthlyFinancialKPIs:
    """Revenue, expenses and net profit for one calendar month."""

    revenue_minor: int
    expenses_minor: int
    net_profit_minor: int


@dataclass(frozen=True)
class ServicePopularity:
    service: str
    count: int


@dataclass(frozen=True)
class ProfessionalPerformance:
    professional_id: int
    count: int
    name: Optional[str] = None
