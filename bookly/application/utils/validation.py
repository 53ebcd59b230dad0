from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bookly.application.exceptions import InvalidAvailabilityError, InvalidPolicyError
from bookly.domain.entities.availability import MINUTES_PER_DAY, WEEKDAYS, Availability, TimeInterval
from bookly.domain.entities.policy import BookingPolicy


def load_timezone(name: str) -> ZoneInfo:
    if not isinstance(name, str) or not name.strip():
        raise InvalidAvailabilityError("timezone is required")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        raise InvalidAvailabilityError(f"unknown timezone {name!r}") from None


def validate_availability(availability: Availability) -> None:
    """
    Check the availability invariants, raising InvalidAvailabilityError with
    the first violation found.

    Within a day intervals must be sorted, non-overlapping and non-touching,
    with 0 <= start < end <= 1440 (end is exclusive).
    """
    load_timezone(availability.timezone)

    for day, intervals in availability.weekly_schedule.items():
        if day not in WEEKDAYS:
            raise InvalidAvailabilityError(f"unknown weekday {day!r}")
        previous: TimeInterval | None = None
        for interval in intervals:
            _check_interval(day, interval)
            if previous is not None:
                if interval.start < previous.start:
                    raise InvalidAvailabilityError(f"{day}: intervals are not sorted")
                if interval.start <= previous.end:
                    raise InvalidAvailabilityError(
                        f"{day}: interval starting at minute {interval.start} overlaps or touches the previous one"
                    )
            previous = interval

    for value in availability.exceptional_dates:
        if not isinstance(value, date) or isinstance(value, datetime):
            raise InvalidAvailabilityError(f"exceptional date {value!r} is not a calendar date")


def _check_interval(day: str, interval: TimeInterval) -> None:
    for bound in (interval.start, interval.end):
        if not isinstance(bound, int) or isinstance(bound, bool):
            raise InvalidAvailabilityError(f"{day}: interval bounds must be minutes of day")
    if interval.start < 0 or interval.start >= MINUTES_PER_DAY:
        raise InvalidAvailabilityError(f"{day}: start minute {interval.start} out of range")
    if interval.end > MINUTES_PER_DAY:
        raise InvalidAvailabilityError(f"{day}: end minute {interval.end} out of range")
    if interval.end <= interval.start:
        raise InvalidAvailabilityError(f"{day}: interval end must be after start")


def validate_policy(policy: BookingPolicy) -> None:
    def _is_int(value: object) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    if not _is_int(policy.slot_duration) or policy.slot_duration <= 0:
        raise InvalidPolicyError("slot_duration must be a positive number of minutes")
    for name in ("buffer_before", "buffer_after", "min_notice_minutes"):
        value = getattr(policy, name)
        if not _is_int(value) or value < 0:
            raise InvalidPolicyError(f"{name} must be zero or more minutes")
    for name in ("limit_per_day", "limit_per_week"):
        value = getattr(policy, name)
        if value is not None and (not _is_int(value) or value < 0):
            raise InvalidPolicyError(f"{name} must be empty (unlimited) or zero or more")
    if not isinstance(policy.vacation_mode, bool):
        raise InvalidPolicyError("vacation_mode must be a boolean")
