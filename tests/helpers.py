from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from bookly.domain.entities.availability import Availability, TimeInterval
from bookly.domain.entities.booking import Booking, BookingStatus

HOST = "host-1"
TZ_NAME = "America/New_York"
TZ = ZoneInfo(TZ_NAME)


def hm(hours: int, minutes: int = 0) -> int:
    return hours * 60 + minutes


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=TZ)


def monday_availability(*intervals: TimeInterval, tz_name: str = TZ_NAME) -> Availability:
    return Availability(
        timezone=tz_name,
        weekly_schedule={"monday": intervals or (TimeInterval(hm(9), hm(17)),)},
    )


def make_booking(
    start: datetime,
    duration: int = 30,
    host_id: str = HOST,
    status: BookingStatus = BookingStatus.confirmed,
) -> Booking:
    return Booking(
        id=uuid.uuid4().hex,
        host_id=host_id,
        guest_name="Guest",
        guest_email="guest@example.com",
        start=start.astimezone(timezone.utc),
        duration=duration,
        status=status,
        meeting_link="https://meet.google.com/abc-defg-hij",
        created_at=start - timedelta(days=1),
    )
