from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bookly.application.use_cases.booking_overview import (
    booking_stats,
    effective_status,
    minutes_until,
    month_trend,
    upcoming_reminder,
)
from bookly.domain.entities.booking import BookingStatus
from tests.helpers import TZ, local, make_booking

# Wednesday
NOW = local(2026, 10, 21, 12, 0)


def test_minutes_until_rounds_up():
    booking = make_booking(NOW + timedelta(minutes=14, seconds=10))
    assert minutes_until(booking, NOW) == 15
    assert minutes_until(make_booking(NOW - timedelta(minutes=5)), NOW) == -5


def test_effective_status_derives_completed():
    past = make_booking(NOW - timedelta(hours=2))
    assert effective_status(past, NOW) == BookingStatus.completed
    assert effective_status(make_booking(NOW + timedelta(hours=1)), NOW) == BookingStatus.confirmed
    cancelled = make_booking(NOW - timedelta(hours=2), status=BookingStatus.cancelled)
    assert effective_status(cancelled, NOW) == BookingStatus.cancelled


def test_upcoming_reminder_picks_the_next_confirmed_meeting():
    soon = make_booking(NOW + timedelta(minutes=20))
    bookings = [
        make_booking(NOW + timedelta(minutes=10), status=BookingStatus.cancelled),
        make_booking(NOW + timedelta(minutes=45)),
        soon,
        make_booking(NOW + timedelta(hours=3)),
    ]
    assert upcoming_reminder(bookings, NOW, lead_minutes=60) == soon
    assert upcoming_reminder(bookings, NOW, lead_minutes=5) is None


def test_booking_stats():
    bookings = [
        make_booking(local(2026, 10, 18, 9, 0)),  # Sunday this week, past
        make_booking(local(2026, 10, 22, 9, 0)),  # tomorrow
        make_booking(local(2026, 10, 30, 9, 0)),  # 9 days out, next week
        make_booking(local(2026, 10, 2, 9, 0)),  # earlier this month
        make_booking(local(2026, 9, 15, 9, 0)),  # last month
        make_booking(local(2026, 8, 15, 9, 0)),  # older
        make_booking(local(2026, 10, 22, 10, 0), status=BookingStatus.cancelled),
    ]

    stats = booking_stats(bookings, NOW.astimezone(timezone.utc), TZ)

    assert stats.total == 6
    assert stats.this_week == 2
    assert stats.this_month == 4
    assert stats.last_month == 1
    assert stats.upcoming == 2
    assert stats.next_7_days == 1
    assert stats.month_trend == 300


def test_stats_for_no_bookings():
    stats = booking_stats([], datetime(2026, 1, 1, tzinfo=timezone.utc), TZ)
    assert stats.total == stats.upcoming == 0


def test_later_months_are_not_counted_as_this_month():
    now = local(2026, 3, 10, 12, 0).astimezone(timezone.utc)
    bookings = [
        make_booking(local(2026, 3, 31, 23, 30)),
        make_booking(local(2026, 4, 1, 0, 0)),
        make_booking(local(2026, 5, 4, 9, 0)),
        make_booking(local(2026, 2, 1, 0, 0)),
    ]

    stats = booking_stats(bookings, now, TZ)

    assert stats.this_month == 1
    assert stats.last_month == 1
    assert stats.upcoming == 3
    assert stats.month_trend == 0


def test_month_trend():
    assert month_trend(3, 2) == 50
    assert month_trend(1, 3) == -67
    assert month_trend(5, 0) == 500
    assert month_trend(0, 0) == 0
    # Halves round toward positive infinity.
    assert month_trend(1, 8) == -87
    assert month_trend(3, 8) == -62
