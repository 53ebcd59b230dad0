from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"  # derived for display, never stored


@dataclass(frozen=True, order=True)
class Slot:
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class Booking:
    id: str
    host_id: str
    guest_name: str
    guest_email: str
    start: datetime
    duration: int
    meeting_link: str
    created_at: datetime
    status: BookingStatus = BookingStatus.confirmed
    notes: str | None = None

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration)

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.confirmed

    def cancelled(self) -> "Booking":
        return replace(self, status=BookingStatus.cancelled)
