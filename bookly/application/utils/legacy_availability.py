"""
Adapters for profiles written before multi-interval schedules existed.

Legacy availability kept one ``hours`` range shared by every enabled day:

    {"days": ["Monday", ...], "hours": {"start": "09:00", "end": "17:00"},
     "timezone": "Asia/Calcutta", "disabledDates": []}

Legacy settings stored the notice window in hours (``minNoticeTime``).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from bookly.domain.entities.availability import WEEKDAYS, Availability, TimeInterval, parse_minute_of_day
from bookly.domain.entities.policy import BookingPolicy

_DEFAULT_HOURS = {"start": "09:00", "end": "17:00"}


def is_legacy_availability(payload: Mapping[str, Any]) -> bool:
    return "days" in payload or "hours" in payload


def availability_from_legacy(payload: Mapping[str, Any], default_timezone: str = "UTC") -> Availability:
    hours = payload.get("hours") or _DEFAULT_HOURS
    interval = TimeInterval(
        start=parse_minute_of_day(hours.get("start", _DEFAULT_HOURS["start"])),
        end=parse_minute_of_day(hours.get("end", _DEFAULT_HOURS["end"])),
    )

    schedule: dict[str, tuple[TimeInterval, ...]] = {}
    for day in payload.get("days") or []:
        key = str(day).strip().lower()
        if key not in WEEKDAYS:
            raise ValueError(f"Unknown weekday: {day!r}")
        schedule[key] = (interval,)

    disabled = frozenset(date.fromisoformat(str(d)[:10]) for d in payload.get("disabledDates") or [])

    return Availability(
        timezone=payload.get("timezone") or default_timezone,
        weekly_schedule=schedule,
        exceptional_dates=disabled,
    )


def policy_from_legacy_settings(settings: Mapping[str, Any], slot_duration: int = 30) -> BookingPolicy:
    """Missing or null legacy fields take the legacy settings page defaults."""
    def _int(key: str, default: int) -> int:
        value = settings.get(key)
        return default if value is None else int(value)

    return BookingPolicy(
        slot_duration=slot_duration,
        buffer_before=_int("bufferBefore", 15),
        buffer_after=_int("bufferAfter", 15),
        min_notice_minutes=_int("minNoticeTime", 24) * 60,
        limit_per_day=_int("limitPerDay", 5),
        limit_per_week=_int("limitPerWeek", 20),
        vacation_mode=bool(settings.get("vacationMode", False)),
    )
