from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class BookingPolicy:
    slot_duration: int = 30
    buffer_before: int = 0
    buffer_after: int = 0
    min_notice_minutes: int = 0
    limit_per_day: int | None = None  # None = unlimited, 0 = nothing allowed
    limit_per_week: int | None = None
    vacation_mode: bool = False

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> "BookingPolicy":
        known = set(BookingPolicy.__dataclass_fields__)
        unknown = set(payload) - known
        if unknown:
            raise ValueError(f"Unknown policy fields: {sorted(unknown)}")
        return BookingPolicy(**dict(payload))
