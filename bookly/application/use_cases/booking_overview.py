from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable

from bookly.application.utils.booking_rules import week_start
from bookly.domain.entities.booking import Booking, BookingStatus


@dataclass(frozen=True)
class BookingStats:
    total: int = 0
    this_week: int = 0
    this_month: int = 0
    last_month: int = 0
    upcoming: int = 0
    next_7_days: int = 0
    month_trend: int = 0


def effective_status(booking: Booking, now: datetime) -> BookingStatus:
    if booking.is_confirmed and booking.end < now:
        return BookingStatus.completed
    return booking.status


def minutes_until(booking: Booking, now: datetime) -> int:
    """Whole minutes until the meeting starts, rounded up; negative once started."""
    return math.ceil((booking.start - now).total_seconds() / 60)


def upcoming_reminder(bookings: Iterable[Booking], now: datetime, lead_minutes: int) -> Booking | None:
    horizon = now + timedelta(minutes=lead_minutes)
    pending = [b for b in bookings if b.is_confirmed and now <= b.start <= horizon]
    return min(pending, key=lambda b: b.start, default=None)


def month_trend(this_month: int, last_month: int) -> int:
    """Percent change against last month, half rounded up; with no last month, this month times 100."""
    if last_month > 0:
        return math.floor((this_month - last_month) / last_month * 100 + 0.5)
    return this_month * 100


def booking_stats(bookings: Iterable[Booking], now: datetime, tz: tzinfo) -> BookingStats:
    """Dashboard counters over non-cancelled bookings, in the host's timezone."""
    local_now = now.astimezone(tz)
    today = local_now.date()

    def _midnight(day: date) -> datetime:
        return datetime.combine(day, time(), tzinfo=tz)

    first_of_month = today.replace(day=1)
    start_of_week = _midnight(week_start(today))
    start_of_next_week = _midnight(week_start(today) + timedelta(days=7))
    start_of_month = _midnight(first_of_month)
    start_of_next_month = _midnight((first_of_month + timedelta(days=32)).replace(day=1))
    start_of_last_month = _midnight((first_of_month - timedelta(days=1)).replace(day=1))
    seven_days = now + timedelta(days=7)

    total = this_week = this_month = last_month = upcoming = next_7_days = 0
    for booking in bookings:
        if booking.status == BookingStatus.cancelled:
            continue
        total += 1
        start = booking.start
        if start > now:
            upcoming += 1
            if start <= seven_days:
                next_7_days += 1
        if start_of_week <= start < start_of_next_week:
            this_week += 1
        if start_of_month <= start < start_of_next_month:
            this_month += 1
        elif start_of_last_month <= start < start_of_month:
            last_month += 1

    return BookingStats(
        total=total,
        this_week=this_week,
        this_month=this_month,
        last_month=last_month,
        upcoming=upcoming,
        next_7_days=next_7_days,
        month_trend=month_trend(this_month, last_month),
    )
