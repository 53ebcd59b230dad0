from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

# Sunday-first, matching the week convention used for weekly limits.
WEEKDAYS: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

MINUTES_PER_DAY = 24 * 60

_AVAILABILITY_FIELDS = {"timezone", "weekly_schedule", "exceptional_dates"}
_INTERVAL_FIELDS = {"start", "end"}


def weekday_name(day: date) -> str:
    return WEEKDAYS[(day.weekday() + 1) % 7]


def parse_minute_of_day(value: int | str) -> int:
    """Accept a minute-of-day integer or an "HH:MM" string."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid time value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        hours, sep, minutes = value.strip().partition(":")
        if not sep or not hours.isdigit() or not minutes.isdigit() or len(minutes) != 2:
            raise ValueError(f"Invalid time value: {value!r}")
        h, m = int(hours), int(minutes)
        if m >= 60 or h > 24 or (h == 24 and m != 0):
            raise ValueError(f"Invalid time value: {value!r}")
        return h * 60 + m
    raise ValueError(f"Invalid time value: {value!r}")


def format_minute_of_day(minute: int) -> str:
    return f"{minute // 60:02d}:{minute % 60:02d}"


@dataclass(frozen=True, order=True)
class TimeInterval:
    start: int  # minute of day, inclusive
    end: int  # minute of day, exclusive

    @property
    def minutes(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Availability:
    timezone: str
    weekly_schedule: Mapping[str, tuple[TimeInterval, ...]] = field(default_factory=dict)
    exceptional_dates: frozenset[date] = frozenset()

    def intervals_for(self, day: date) -> tuple[TimeInterval, ...]:
        if day in self.exceptional_dates:
            return ()
        return tuple(self.weekly_schedule.get(weekday_name(day), ()))

    def to_payload(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "weekly_schedule": {
                day: [
                    {"start": format_minute_of_day(i.start), "end": format_minute_of_day(i.end)}
                    for i in self.weekly_schedule.get(day, ())
                ]
                for day in WEEKDAYS
            },
            "exceptional_dates": sorted(d.isoformat() for d in self.exceptional_dates),
        }

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> "Availability":
        """Build an Availability from a JSON-like mapping.

        Unknown keys are rejected. Structural problems raise ValueError; the
        semantic invariants (ordering, overlap, timezone) are checked by
        ``validate_availability``.
        """
        unknown = set(payload) - _AVAILABILITY_FIELDS
        if unknown:
            raise ValueError(f"Unknown availability fields: {sorted(unknown)}")
        if "timezone" not in payload:
            raise ValueError("Availability requires a timezone")

        schedule: dict[str, tuple[TimeInterval, ...]] = {}
        for day, intervals in (payload.get("weekly_schedule") or {}).items():
            key = str(day).strip().lower()
            if key not in WEEKDAYS:
                raise ValueError(f"Unknown weekday: {day!r}")
            if key in schedule:
                raise ValueError(f"Duplicate weekday: {day!r}")
            parsed = []
            for raw in intervals or []:
                extra = set(raw) - _INTERVAL_FIELDS
                if extra:
                    raise ValueError(f"Unknown interval fields: {sorted(extra)}")
                parsed.append(
                    TimeInterval(
                        start=parse_minute_of_day(raw["start"]),
                        end=parse_minute_of_day(raw["end"]),
                    )
                )
            schedule[key] = tuple(parsed)

        exceptional = set()
        for raw_date in payload.get("exceptional_dates") or []:
            exceptional.add(raw_date if isinstance(raw_date, date) else date.fromisoformat(str(raw_date)))

        return Availability(
            timezone=str(payload["timezone"]),
            weekly_schedule=schedule,
            exceptional_dates=frozenset(exceptional),
        )


def default_availability(timezone: str) -> Availability:
    """Mon-Fri, 09:00-17:00."""
    working_day = (TimeInterval(start=9 * 60, end=17 * 60),)
    return Availability(
        timezone=timezone,
        weekly_schedule={day: working_day for day in WEEKDAYS[1:6]},
    )
