from __future__ import annotations

import logging

from bookly.application.exceptions import NotFoundError
from bookly.application.ports.booking_ledger import BookingLedgerPort
from bookly.domain.entities.booking import Booking


class CancelBookingUseCase:
    def __init__(self, ledger: BookingLedgerPort) -> None:
        self._ledger = ledger
        self._logger = logging.getLogger(__name__)

    def execute(self, booking_id: str) -> Booking:
        """Cancel a booking. Cancelling twice returns the same cancelled booking."""
        booking = self._ledger.mark_cancelled(booking_id)
        if booking is None:
            raise NotFoundError(f"booking {booking_id} not found")
        self._logger.info("Booking cancelled", extra={"booking_id": booking_id, "host_id": booking.host_id})
        return booking
