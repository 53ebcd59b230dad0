from __future__ import annotations

import threading
from datetime import datetime

from bookly.application.ports.booking_ledger import BookingLedgerPort, Precondition
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.domain.entities.availability import Availability, default_availability
from bookly.domain.entities.booking import Booking
from bookly.domain.entities.policy import BookingPolicy


class MemoryProfileStore(ProfileStorePort):
    def __init__(self, default_timezone: str = "UTC", default_policy: BookingPolicy | None = None) -> None:
        self._availability: dict[str, Availability] = {}
        self._policies: dict[str, BookingPolicy] = {}
        self._default_timezone = default_timezone
        self._default_policy = default_policy or BookingPolicy()

    def read_availability(self, host_id: str) -> Availability:
        return self._availability.get(host_id) or default_availability(self._default_timezone)

    def read_policy(self, host_id: str) -> BookingPolicy:
        return self._policies.get(host_id, self._default_policy)

    def write_availability(self, host_id: str, availability: Availability) -> None:
        self._availability[host_id] = availability

    def write_policy(self, host_id: str, policy: BookingPolicy) -> None:
        self._policies[host_id] = policy


class MemoryBookingLedger(BookingLedgerPort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._host_bookings: dict[str, list[str]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, host_id: str) -> threading.Lock:
        """Get or create the commit lock for a host."""
        with self._lock_lock:
            if host_id not in self._locks:
                self._locks[host_id] = threading.Lock()
            return self._locks[host_id]

    def _host_snapshot(self, host_id: str) -> list[Booking]:
        bookings = [self._bookings[i] for i in self._host_bookings.get(host_id, [])]
        return sorted(bookings, key=lambda b: b.start)

    def read_confirmed_bookings(self, host_id: str, start: datetime, end: datetime) -> list[Booking]:
        with self._get_lock(host_id):
            bookings = self._host_snapshot(host_id)
        return [b for b in bookings if b.is_confirmed and b.start < end and b.end > start]

    def list_bookings(self, host_id: str) -> list[Booking]:
        with self._get_lock(host_id):
            return self._host_snapshot(host_id)

    def get_booking(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def append_booking(self, booking: Booking, precondition: Precondition | None = None) -> Booking:
        with self._get_lock(booking.host_id):
            if booking.id in self._bookings:
                raise ValueError(f"Duplicate booking id {booking.id}")
            if precondition is not None:
                current = [b for b in self._host_snapshot(booking.host_id) if b.is_confirmed]
                precondition(current)
            self._bookings[booking.id] = booking
            self._host_bookings.setdefault(booking.host_id, []).append(booking.id)
            return booking

    def mark_cancelled(self, booking_id: str) -> Booking | None:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return None
        with self._get_lock(booking.host_id):
            booking = self._bookings[booking_id]
            if booking.is_confirmed:
                booking = booking.cancelled()
                self._bookings[booking_id] = booking
            return booking
