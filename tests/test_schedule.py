"""Tests for business hours and opening-hours resolution."""

import pytest
from datetime import date, time

from bizdash.domain.entities import BusinessException, BusinessHours
from bizdash.domain.errors import RemoteError, ValidationError
from bizdash.domain.schedule import (
    DAY_NAMES,
    BusinessHoursService,
    opening_hours_for,
    weekday_index,
)

from conftest import FlakyGateway, OTHER_OWNER, OWNER, run

MONDAY = date(2024, 3, 4)
SUNDAY = date(2024, 3, 10)


def hours(day, start=None, end=None, owner=OWNER):
    return BusinessHours(owner_id=owner, day_of_week=day, start_time=start, end_time=end)


class TestWeekdays:
    def test_sunday_is_zero(self):
        assert weekday_index(SUNDAY) == 0
        assert weekday_index(MONDAY) == 1
        assert DAY_NAMES[weekday_index(date(2024, 3, 9))] == "Saturday"


class TestOpeningHoursFor:
    def test_regular_weekday(self):
        week = [hours(1, time(9), time(18))]
        assert opening_hours_for(MONDAY, week) == (time(9), time(18))

    def test_closed_or_missing_day(self):
        week = [hours(0), hours(1, time(9), time(18))]
        assert opening_hours_for(SUNDAY, week) is None
        assert opening_hours_for(date(2024, 3, 5), week) is None

    def test_exception_overrides_weekday(self):
        week = [hours(1, time(9), time(18))]
        holiday = BusinessException(
            id=1, owner_id=OWNER, exception_date=MONDAY, description="Holiday"
        )
        short = BusinessException(
            id=2,
            owner_id=OWNER,
            exception_date=MONDAY,
            description="Short day",
            start_time=time(10),
            end_time=time(14),
        )
        assert opening_hours_for(MONDAY, week, [holiday]) is None
        assert opening_hours_for(MONDAY, week, [short]) == (time(10), time(14))
        assert opening_hours_for(date(2024, 3, 11), week, [holiday]) == (time(9), time(18))


class TestBusinessHoursService:
    def test_week_defaults_to_closed(self, hours_service):
        week = run(hours_service.fetch_week(OWNER))
        assert [entry.day_of_week for entry in week] == list(range(7))
        assert all(entry.is_closed for entry in week)
        assert all(entry.id is None for entry in week)

    def test_save_inserts_then_updates(self, hours_service):
        week = run(hours_service.save_week(OWNER, [hours(1, time(9), time(18))]))
        assert week[1].start_time == time(9)
        first_id = week[1].id
        assert first_id is not None

        week = run(hours_service.save_week(OWNER, [hours(1, time(10), time(19))]))
        assert week[1].id == first_id
        assert (week[1].start_time, week[1].end_time) == (time(10), time(19))

    def test_save_can_close_a_day(self, hours_service):
        run(hours_service.save_week(OWNER, [hours(6, time(9), time(13))]))
        week = run(hours_service.save_week(OWNER, [hours(6)]))
        assert week[6].is_closed
        assert week[6].id is not None

    def test_untouched_days_are_kept(self, hours_service):
        run(hours_service.save_week(OWNER, [hours(2, time(9), time(17))]))
        week = run(hours_service.save_week(OWNER, [hours(3, time(9), time(17))]))
        assert not week[2].is_closed
        assert not week[3].is_closed

    def test_owners_are_isolated(self, hours_service):
        run(hours_service.save_week(OWNER, [hours(1, time(9), time(18))]))
        week = run(hours_service.save_week(OTHER_OWNER, [hours(1, time(8), time(12), OTHER_OWNER)]))

        assert week[1].start_time == time(8)
        assert run(hours_service.fetch_week(OWNER))[1].start_time == time(9)

    def test_invalid_entry_makes_no_request(self, temp_gateway):
        gateway = FlakyGateway(temp_gateway)
        service = BusinessHoursService(gateway)

        with pytest.raises(ValidationError):
            run(service.save_week(OWNER, [hours(1, time(9), time(18)), hours(2, time(9))]))
        with pytest.raises(ValidationError, match="more than once"):
            run(service.save_week(OWNER, [hours(1, time(9), time(18)), hours(1)]))
        with pytest.raises(ValidationError):
            run(service.save_week("", [hours(1)]))
        assert gateway.calls == []

    def test_gateway_failure_propagates(self, temp_gateway):
        gateway = FlakyGateway(temp_gateway, fail_on={"insert"})
        service = BusinessHoursService(gateway)

        with pytest.raises(RemoteError):
            run(service.save_week(OWNER, [hours(1, time(9), time(18))]))

    def test_failure_partway_keeps_earlier_days(self, temp_gateway):
        """Days are written in order; a failure stops at the failing day."""
        service = BusinessHoursService(temp_gateway)
        run(service.save_week(OWNER, [hours(2, time(9), time(17))]))

        gateway = FlakyGateway(temp_gateway, fail_on={"update"})
        with pytest.raises(RemoteError):
            run(
                BusinessHoursService(gateway).save_week(
                    OWNER, [hours(1, time(10), time(18)), hours(2, time(12), time(20))]
                )
            )

        week = run(service.fetch_week(OWNER))
        assert week[1].start_time == time(10)
        assert week[2].start_time == time(9)
