from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Sequence

from bookly.application.exceptions import ConflictError, InvalidSlotError, PolicyLimitExceeded
from bookly.application.ports.booking_ledger import BookingLedgerPort
from bookly.application.ports.meeting_link import MeetingLinkPort
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.application.use_cases.generate_slots import candidate_slots
from bookly.application.utils.booking_rules import BookingCounts, exhausted_limit, find_conflict
from bookly.application.utils.validation import load_timezone, validate_availability, validate_policy
from bookly.domain.entities.booking import Booking, BookingStatus, Slot


class CreateBookingUseCase:
    """
    Turns a guest's slot choice into a confirmed booking.

    Slot shape and notice window are checked up front; overlap and caps are
    re-checked inside the ledger's per-host atomic append, against the state
    committed at that moment rather than the state the guest was shown.
    """

    def __init__(
        self,
        profiles: ProfileStorePort,
        ledger: BookingLedgerPort,
        links: MeetingLinkPort,
    ) -> None:
        self._profiles = profiles
        self._ledger = ledger
        self._links = links
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        host_id: str,
        slot: Slot,
        guest_name: str,
        guest_email: str,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Booking:
        if slot.start.tzinfo is None or slot.end.tzinfo is None:
            raise InvalidSlotError("slot times must be timezone-aware")
        if not guest_name.strip() or not guest_email.strip():
            raise ValueError("guest name and email are required")

        now = now or datetime.now(timezone.utc)
        availability = self._profiles.read_availability(host_id)
        policy = self._profiles.read_policy(host_id)
        validate_availability(availability)
        validate_policy(policy)
        tz = load_timezone(availability.timezone)

        start = slot.start.astimezone(timezone.utc)
        end = slot.end.astimezone(timezone.utc)
        if end - start != timedelta(minutes=policy.slot_duration):
            raise InvalidSlotError(f"slots are {policy.slot_duration} minutes long")
        local_day = start.astimezone(tz).date()
        if Slot(start=start, end=end) not in set(candidate_slots(availability, policy, local_day, tz)):
            raise InvalidSlotError("slot is outside the host's availability")

        if policy.vacation_mode:
            raise ConflictError("host is not accepting bookings")
        if start < now + timedelta(minutes=policy.min_notice_minutes):
            raise ConflictError("slot is inside the minimum notice window")

        def precondition(current: Sequence[Booking]) -> None:
            conflict = find_conflict(start, end, current, policy)
            if conflict is not None:
                raise ConflictError(f"slot overlaps booking {conflict.id}")
            limit = exhausted_limit(local_day, BookingCounts(current, tz), policy)
            if limit is not None:
                raise PolicyLimitExceeded(f"per-{limit} booking limit reached")

        booking = Booking(
            id=uuid.uuid4().hex,
            host_id=host_id,
            guest_name=guest_name.strip(),
            guest_email=guest_email.strip(),
            notes=notes or None,
            start=start,
            duration=policy.slot_duration,
            status=BookingStatus.confirmed,
            meeting_link=self._links.generate(),
            created_at=now,
        )

        try:
            stored = self._ledger.append_booking(booking, precondition)
        except ConflictError as e:
            self._logger.info(
                "Booking rejected",
                extra={"host_id": host_id, "slot_start": start.isoformat(), "reason": str(e)},
            )
            raise

        self._logger.info(
            "Booking confirmed",
            extra={"host_id": host_id, "booking_id": stored.id, "slot_start": start.isoformat()},
        )
        return stored
