"""Dashboard metrics computed from entry store snapshots.

All functions are pure: the reference date and the business timezone are
parameters, never read from the environment. Monetary results stay in
integer minor units; formatting is left to the caller.

Windows are trailing and inclusive: a ``window_days`` of 7 ending on the
reference date covers the reference date and the six days before it.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional

from dateutil import tz

from bizdash.domain.entities import (
    Appointment,
    DailyEarnings,
    DailyKPIs,
    EntryType,
    FinancialEntry,
    MonthlyFinancialKPIs,
    Professional,
    ProfessionalPerformance,
    ServicePopularity,
)
from bizdash.domain.money import divide_half_up


def local_date(instant: datetime, zone: tzinfo = tz.UTC) -> date:
    """Calendar date of ``instant`` in the business timezone.

    Naive instants are taken to be UTC, matching how they are stored.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=tz.UTC)
    return instant.astimezone(zone).date()


def in_window(day: date, reference_date: date, window_days: int) -> bool:
    """Whether ``day`` falls in the trailing window ending on ``reference_date``."""
    start = reference_date - timedelta(days=window_days - 1)
    return start <= day <= reference_date


def appointments_on(
    appointments: Iterable[Appointment], reference_date: date, zone: tzinfo = tz.UTC
) -> list[Appointment]:
    """Appointments falling on ``reference_date``, earliest first."""
    matching = [a for a in appointments if local_date(a.scheduled_at, zone) == reference_date]
    return sorted(matching, key=lambda a: (a.scheduled_at, a.id))


def daily_kpis(
    appointments: Iterable[Appointment], reference_date: date, zone: tzinfo = tz.UTC
) -> DailyKPIs:
    """Earnings, appointment count and average ticket for one day.

    The average ticket is rounded half up to the nearest minor unit.
    """
    todays = appointments_on(appointments, reference_date, zone)
    earnings = sum(a.price for a in todays)
    count = len(todays)
    avg_ticket = divide_half_up(earnings, count) if count > 0 else 0
    return DailyKPIs(earnings_minor=earnings, appointment_count=count, avg_ticket_minor=avg_ticket)


def weekly_earnings(
    entries: Iterable[FinancialEntry], reference_date: date, window_days: int = 7
) -> list[DailyEarnings]:
    """Revenue per day over the trailing window, oldest day first.

    Days without revenue entries are left out rather than reported as zero.
    """
    if window_days < 1:
        return []
    totals: dict[date, int] = defaultdict(int)
    for entry in entries:
        if entry.entry_type is not EntryType.REVENUE:
            continue
        if in_window(entry.entry_date, reference_date, window_days):
            totals[entry.entry_date] += entry.amount
    return [DailyEarnings(date=day, earnings_minor=totals[day]) for day in sorted(totals)]


def monthly_financial_kpis(
    entries: Iterable[FinancialEntry], reference_month: date
) -> MonthlyFinancialKPIs:
    """Revenue, expenses and (signed) net profit for the month of ``reference_month``."""
    revenue = 0
    expenses = 0
    for entry in entries:
        if (entry.entry_date.year, entry.entry_date.month) != (
            reference_month.year,
            reference_month.month,
        ):
            continue
        if entry.entry_type is EntryType.REVENUE:
            revenue += entry.amount
        else:
            expenses += entry.amount
    return MonthlyFinancialKPIs(
        revenue_minor=revenue,
        expenses_minor=expenses,
        net_profit_minor=revenue - expenses,
    )


def _window_appointments(
    appointments: Iterable[Appointment], reference_date: date, window_days: int, zone: tzinfo
) -> list[Appointment]:
    if window_days < 1:
        return []
    return [
        a
        for a in appointments
        if in_window(local_date(a.scheduled_at, zone), reference_date, window_days)
    ]


def popular_services(
    appointments: Iterable[Appointment],
    reference_date: date,
    window_days: int = 30,
    top_n: int = 5,
    zone: tzinfo = tz.UTC,
) -> list[ServicePopularity]:
    """Most booked services in the trailing window.

    Sorted by count descending; equal counts are ordered by service label.
    """
    if top_n < 1:
        return []
    counts: dict[str, int] = defaultdict(int)
    for appointment in _window_appointments(appointments, reference_date, window_days, zone):
        counts[appointment.service] += 1
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0].casefold(), item[0]))
    return [ServicePopularity(service=service, count=count) for service, count in ranked[:top_n]]


def professional_performance(
    appointments: Iterable[Appointment],
    reference_date: date,
    window_days: int = 30,
    zone: tzinfo = tz.UTC,
    professionals: Optional[Iterable[Professional]] = None,
) -> list[ProfessionalPerformance]:
    """Appointment count per professional in the trailing window (all of them).

    Names are resolved from ``professionals`` when given; equal counts are
    ordered by name, then by id, with unresolved professionals last.
    """
    names = {p.id: p.name for p in professionals or ()}
    counts: dict[int, int] = defaultdict(int)
    for appointment in _window_appointments(appointments, reference_date, window_days, zone):
        counts[appointment.professional_id] += 1
    rows = [
        ProfessionalPerformance(professional_id=pid, count=count, name=names.get(pid))
        for pid, count in counts.items()
    ]
    return sorted(
        rows,
        key=lambda row: (
            -row.count,
            row.name is None,
            (row.name or "").casefold(),
            row.professional_id,
        ),
    )
