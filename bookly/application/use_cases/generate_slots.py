from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Iterator, Sequence

from bookly.application.ports.booking_ledger import BookingLedgerPort
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.application.utils.booking_rules import (
    BookingCounts,
    exhausted_limit,
    find_conflict,
    week_start,
)
from bookly.application.utils.validation import load_timezone, validate_availability, validate_policy
from bookly.domain.entities.availability import Availability
from bookly.domain.entities.booking import Booking, Slot
from bookly.domain.entities.policy import BookingPolicy


def local_instant(day: date, minute: int, tz: tzinfo) -> datetime | None:
    """
    UTC instant of the wall-clock time ``minute`` minutes after midnight of
    ``day`` in ``tz``. Returns None for wall-clock times skipped by a DST jump.
    """
    naive = datetime.combine(day, time()) + timedelta(minutes=minute)
    aware = naive.replace(tzinfo=tz)
    utc = aware.astimezone(timezone.utc)
    if utc.astimezone(tz).replace(tzinfo=None) != naive:
        return None
    return utc


def candidate_slots(availability: Availability, policy: BookingPolicy, day: date, tz: tzinfo) -> Iterator[Slot]:
    """Discretize the day's intervals into whole slots; a short remainder is dropped."""
    length = timedelta(minutes=policy.slot_duration)
    for interval in availability.intervals_for(day):
        minute = interval.start
        while minute + policy.slot_duration <= interval.end:
            start = local_instant(day, minute, tz)
            end = local_instant(day, minute + policy.slot_duration, tz)
            minute += policy.slot_duration
            if start is None or end is None or end - start != length:
                continue
            yield Slot(start=start, end=end)


def generate_slots(
    availability: Availability,
    policy: BookingPolicy,
    existing_bookings: Iterable[Booking],
    host_id: str,
    range_start: date,
    range_end: date,
    now: datetime,
) -> list[Slot]:
    """
    Bookable slots for the local dates in [range_start, range_end).

    Pure: every input, including ``now``, is explicit. Bookings of other
    hosts and non-confirmed bookings are ignored. Day and week caps empty a
    whole day rather than raising.
    """
    if range_start >= range_end:
        raise ValueError("range_start must be before range_end")
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    validate_availability(availability)
    validate_policy(policy)
    if policy.vacation_mode:
        return []

    tz = load_timezone(availability.timezone)
    bookings = [b for b in existing_bookings if b.host_id == host_id and b.is_confirmed]
    counts = BookingCounts(bookings, tz)
    earliest = now + timedelta(minutes=policy.min_notice_minutes)

    slots: list[Slot] = []
    day = range_start
    while day < range_end:
        if exhausted_limit(day, counts, policy) is None:
            for slot in candidate_slots(availability, policy, day, tz):
                if slot.start < earliest:
                    continue
                if find_conflict(slot.start, slot.end, bookings, policy) is not None:
                    continue
                slots.append(slot)
        day += timedelta(days=1)

    slots.sort()
    return slots


def ledger_window(
    range_start: date,
    range_end: date,
    tz: tzinfo,
    policy: BookingPolicy,
) -> tuple[datetime, datetime]:
    """
    Instant range of bookings that can influence slots in the date range:
    whole Sunday-start weeks (for the weekly cap) widened by the buffers and
    a day on each side for timezone slack.
    """
    padding = timedelta(days=1, minutes=policy.buffer_before + policy.buffer_after)
    first = week_start(range_start)
    last = week_start(range_end - timedelta(days=1)) + timedelta(days=7)
    start = datetime.combine(first, time(), tzinfo=tz).astimezone(timezone.utc) - padding
    end = datetime.combine(last, time(), tzinfo=tz).astimezone(timezone.utc) + padding
    return start, end


class GenerateSlotsUseCase:
    def __init__(
        self,
        profiles: ProfileStorePort,
        ledger: BookingLedgerPort,
        max_range_days: int = 62,
    ) -> None:
        self._profiles = profiles
        self._ledger = ledger
        self._max_range_days = max_range_days
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        host_id: str,
        range_start: date,
        range_end: date,
        now: datetime | None = None,
    ) -> list[Slot]:
        if range_start >= range_end:
            raise ValueError("start must be before end")
        if (range_end - range_start).days > self._max_range_days:
            raise ValueError(f"range may span at most {self._max_range_days} days")

        now = now or datetime.now(timezone.utc)
        availability = self._profiles.read_availability(host_id)
        policy = self._profiles.read_policy(host_id)
        validate_availability(availability)

        tz = load_timezone(availability.timezone)
        window_start, window_end = ledger_window(range_start, range_end, tz, policy)
        bookings: Sequence[Booking] = self._ledger.read_confirmed_bookings(host_id, window_start, window_end)

        slots = generate_slots(availability, policy, bookings, host_id, range_start, range_end, now)
        self._logger.debug(
            "Generated %d slots",
            len(slots),
            extra={"host_id": host_id, "range": f"{range_start}..{range_end}"},
        )
        return slots
