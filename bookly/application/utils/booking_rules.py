from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from bookly.domain.entities.booking import Booking
from bookly.domain.entities.policy import BookingPolicy


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def conflicts_with(start: datetime, end: datetime, booking: Booking, policy: BookingPolicy) -> bool:
    """
    Buffered overlap test, applied in both directions: the candidate must
    stay clear of the booking padded by the buffers, and the booking must
    stay clear of the candidate padded by the same buffers.
    """
    before = timedelta(minutes=policy.buffer_before)
    after = timedelta(minutes=policy.buffer_after)
    if start < booking.end + after and end > booking.start - before:
        return True
    if start - before < booking.end and end + after > booking.start:
        return True
    return False


def find_conflict(
    start: datetime,
    end: datetime,
    bookings: Iterable[Booking],
    policy: BookingPolicy,
) -> Booking | None:
    for booking in bookings:
        if booking.is_confirmed and conflicts_with(start, end, booking, policy):
            return booking
    return None


class BookingCounts:
    """Confirmed bookings bucketed by local start date and Sunday-start week."""

    def __init__(self, bookings: Iterable[Booking], tz: tzinfo) -> None:
        self._per_day: Counter[date] = Counter()
        self._per_week: Counter[date] = Counter()
        for booking in bookings:
            if not booking.is_confirmed:
                continue
            local_day = booking.start.astimezone(tz).date()
            self._per_day[local_day] += 1
            self._per_week[week_start(local_day)] += 1

    def day(self, day: date) -> int:
        return self._per_day[day]

    def week(self, day: date) -> int:
        return self._per_week[week_start(day)]


def exhausted_limit(day: date, counts: BookingCounts, policy: BookingPolicy) -> str | None:
    """
    Name of the cap ("day" or "week") that one more booking on ``day`` would
    exceed, or None when there is room.
    """
    if policy.limit_per_day is not None and counts.day(day) + 1 > policy.limit_per_day:
        return "day"
    if policy.limit_per_week is not None and counts.week(day) + 1 > policy.limit_per_week:
        return "week"
    return None
