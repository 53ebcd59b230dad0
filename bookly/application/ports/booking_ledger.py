from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Sequence

from bookly.domain.entities.booking import Booking

# Receives the host's confirmed bookings at commit time; raises ConflictError to abort.
Precondition = Callable[[Sequence[Booking]], None]


class BookingLedgerPort(ABC):
    @abstractmethod
    def read_confirmed_bookings(self, host_id: str, start: datetime, end: datetime) -> list[Booking]:
        """Confirmed bookings of the host intersecting [start, end), ordered by start."""
        raise NotImplementedError

    @abstractmethod
    def list_bookings(self, host_id: str) -> list[Booking]:
        """All bookings of the host in any status, ordered by start."""
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def append_booking(self, booking: Booking, precondition: Precondition | None = None) -> Booking:
        """
        Atomically append a booking.
        The precondition runs while the host is locked, against the committed
        confirmed bookings of that host. If it raises, nothing is written.
        """
        raise NotImplementedError

    @abstractmethod
    def mark_cancelled(self, booking_id: str) -> Booking | None:
        """
        Cancel a booking. Returns the stored booking (already-cancelled
        bookings are returned unchanged) or None if the id is unknown.
        """
        raise NotImplementedError
