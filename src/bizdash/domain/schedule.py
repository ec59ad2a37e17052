"""Business hours domain service."""

import logging
from datetime import date, time
from typing import Iterable, Optional

from bizdash.domain.entities import BusinessException, BusinessHours
from bizdash.domain.errors import ValidationError
from bizdash.domain.records import parse_business_hours
from bizdash.domain.store import require_owner
from bizdash.domain.validation import business_hours_values
from bizdash.gateway.base import BUSINESS_HOURS, SyncGateway

logger = logging.getLogger(__name__)

# Weekday numbering used for business hours: 0 = Sunday ... 6 = Saturday
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def weekday_index(day: date) -> int:
    """Weekday of ``day`` in business-hours numbering (0 = Sunday)."""
    return (day.weekday() + 1) % 7


def opening_hours_for(
    day: date,
    hours: Iterable[BusinessHours],
    exceptions: Iterable[BusinessException] = (),
) -> Optional[tuple[time, time]]:
    """Resolve the opening hours of a calendar date.

    A business exception on that date overrides the regular weekday hours.

    Returns:
        (start, end) tuple, or None if the business is closed that day
    """
    for exception in exceptions:
        if exception.exception_date == day:
            if exception.is_closed_all_day:
                return None
            return exception.start_time, exception.end_time

    index = weekday_index(day)
    for entry in hours:
        if entry.day_of_week == index:
            if entry.is_closed:
                return None
            return entry.start_time, entry.end_time
    return None


class BusinessHoursService:
    """Service for reading and saving the weekly opening hours."""

    def __init__(self, gateway: SyncGateway):
        """Initialize business hours service.

        Args:
            gateway: Sync gateway instance
        """
        self.gateway = gateway

    async def _fetch_stored(self, owner_id: str) -> list[BusinessHours]:
        records = await self.gateway.select(BUSINESS_HOURS, owner_id, order_by="day_of_week")
        return [parse_business_hours(record) for record in records]

    async def fetch_week(self, owner_id: str) -> list[BusinessHours]:
        """Get the hours for all seven weekdays.

        Weekdays without a stored record are returned as closed.

        Args:
            owner_id: Owner account identifier

        Returns:
            Seven BusinessHours entities ordered Sunday to Saturday
        """
        owner_id = require_owner(owner_id)
        stored = {entry.day_of_week: entry for entry in await self._fetch_stored(owner_id)}
        return [
            stored.get(day, BusinessHours(owner_id=owner_id, day_of_week=day))
            for day in range(7)
        ]

    async def save_week(
        self, owner_id: str, hours: Iterable[BusinessHours]
    ) -> list[BusinessHours]:
        """Save opening hours, one record per weekday (insert or update).

        Every entry is validated before anything is sent to the gateway.
        Days are then written one at a time, so a RemoteError partway through
        leaves the earlier days saved and the later ones untouched; calling
        again with the same hours completes the week.

        Args:
            owner_id: Owner account identifier
            hours: Hours to save; weekdays not mentioned are left untouched

        Returns:
            The full week after saving

        Raises:
            ValidationError: If a weekday repeats or an entry is invalid
            RemoteError: If the gateway fails; days before the failing one
                stay saved
        """
        owner_id = require_owner(owner_id)
        patches: dict[int, dict] = {}
        for entry in hours:
            values = business_hours_values(entry)
            if values["day_of_week"] in patches:
                raise ValidationError(
                    f"{DAY_NAMES[values['day_of_week']]} is given more than once"
                )
            patches[values["day_of_week"]] = values

        existing = {entry.day_of_week: entry for entry in await self._fetch_stored(owner_id)}
        for day, values in sorted(patches.items()):
            current = existing.get(day)
            if current is None:
                await self.gateway.insert(BUSINESS_HOURS, owner_id, values)
            else:
                await self.gateway.update(BUSINESS_HOURS, owner_id, current.id, values)
            logger.info("Saved business hours for %s", DAY_NAMES[day])

        return await self.fetch_week(owner_id)
