from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from bookly.application.use_cases.booking_overview import BookingStats, effective_status
from bookly.domain.entities.availability import Availability
from bookly.domain.entities.booking import Booking, Slot
from bookly.domain.entities.policy import BookingPolicy


class IntervalSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: int | str
    end: int | str


class AvailabilitySchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    timezone: str
    weekly_schedule: dict[str, list[IntervalSchema]] = Field(default_factory=dict)
    exceptional_dates: list[date] = Field(default_factory=list)

    def to_entity(self) -> Availability:
        return Availability.from_payload(self.model_dump(mode="json"))

    @classmethod
    def from_entity(cls, availability: Availability) -> "AvailabilitySchema":
        return cls.model_validate(availability.to_payload())


class PolicySchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slot_duration: int = Field(30, gt=0)
    buffer_before: int = Field(0, ge=0)
    buffer_after: int = Field(0, ge=0)
    min_notice_minutes: int = Field(0, ge=0)
    limit_per_day: int | None = Field(None, ge=0)
    limit_per_week: int | None = Field(None, ge=0)
    vacation_mode: bool = False

    def to_entity(self) -> BookingPolicy:
        return BookingPolicy(**self.model_dump())

    @classmethod
    def from_entity(cls, policy: BookingPolicy) -> "PolicySchema":
        return cls.model_validate(policy.to_payload())


class LegacyProfileSchema(BaseModel):
    availability: dict[str, Any]
    settings: dict[str, Any] | None = None


class SlotSchema(BaseModel):
    start: datetime
    end: datetime

    @classmethod
    def from_entity(cls, slot: Slot, tz: tzinfo) -> "SlotSchema":
        return cls(start=slot.start.astimezone(tz), end=slot.end.astimezone(tz))


class SlotListSchema(BaseModel):
    host_id: str
    timezone: str
    slots: list[SlotSchema]


class BookingRequestSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: AwareDatetime
    end: AwareDatetime
    guest_name: str = Field(min_length=1, max_length=200)
    guest_email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    notes: str | None = Field(None, max_length=2000)


class BookingSchema(BaseModel):
    id: str
    host_id: str
    guest_name: str
    guest_email: str
    notes: str | None = None
    start: datetime
    end: datetime
    duration: int
    status: str
    meeting_link: str
    created_at: datetime

    @classmethod
    def from_entity(cls, booking: Booking, now: datetime) -> "BookingSchema":
        return cls(
            id=booking.id,
            host_id=booking.host_id,
            guest_name=booking.guest_name,
            guest_email=booking.guest_email,
            notes=booking.notes,
            start=booking.start,
            end=booking.end,
            duration=booking.duration,
            status=effective_status(booking, now).value,
            meeting_link=booking.meeting_link,
            created_at=booking.created_at,
        )


class StatsSchema(BaseModel):
    total: int
    this_week: int
    this_month: int
    last_month: int
    upcoming: int
    next_7_days: int
    month_trend: int

    @classmethod
    def from_entity(cls, stats: BookingStats) -> "StatsSchema":
        return cls(**stats.__dict__)


class ReminderSchema(BaseModel):
    booking: BookingSchema | None = None
    minutes_until: int | None = None
