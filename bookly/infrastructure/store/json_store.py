from __future__ import annotations

import json
import logging
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from bookly.application.exceptions import LedgerUnavailableError
from bookly.application.ports.booking_ledger import BookingLedgerPort, Precondition
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.domain.entities.availability import Availability, default_availability
from bookly.domain.entities.booking import Booking, BookingStatus
from bookly.domain.entities.policy import BookingPolicy

_HOST_ID_RE = re.compile(r"^[A-Za-z0-9_.@-]{1,128}$")

logger = logging.getLogger(__name__)


def _host_file(directory: Path, host_id: str) -> Path:
    if not _HOST_ID_RE.match(host_id) or host_id in {".", ".."}:
        raise ValueError(f"Invalid host id: {host_id!r}")
    return directory / f"{host_id}.json"


def _load_json(file_path: Path, strict: bool = False) -> dict[str, Any] | None:
    """
    Load a JSON document, None if missing.
    A corrupted file reads as None, or raises LedgerUnavailableError when strict.
    """
    if not file_path.exists():
        return None
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value is not an object")
        return data
    except (ValueError, OSError) as e:
        if strict:
            logger.error("Unreadable ledger file", extra={"reason": str(file_path)})
            raise LedgerUnavailableError(f"ledger file {file_path.name} is unreadable") from e
        logger.warning("Unreadable store file, treating as empty", extra={"reason": str(file_path)})
        return None


def _save_json(file_path: Path, data: dict[str, Any]) -> None:
    """Save a JSON document atomically."""
    temp_path = file_path.with_suffix(".json.tmp")
    try:
        # Write to temp file
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        # Atomic rename
        temp_path.replace(file_path)
    except Exception:
        # Clean up temp file on error
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise


class _HostLocks:
    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def get(self, host_id: str) -> threading.Lock:
        with self._lock_lock:
            if host_id not in self._locks:
                self._locks[host_id] = threading.Lock()
            return self._locks[host_id]


class JsonProfileStore(ProfileStorePort):
    def __init__(
        self,
        data_dir: str = "./data/profiles",
        default_timezone: str = "UTC",
        default_policy: BookingPolicy | None = None,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._default_timezone = default_timezone
        self._default_policy = default_policy or BookingPolicy()
        self._locks = _HostLocks()

    def _load(self, host_id: str) -> dict[str, Any]:
        return _load_json(_host_file(self._data_dir, host_id)) or {"host_id": host_id, "version": 1}

    def read_availability(self, host_id: str) -> Availability:
        with self._locks.get(host_id):
            payload = self._load(host_id).get("availability")
        if not payload:
            return default_availability(self._default_timezone)
        return Availability.from_payload(payload)

    def read_policy(self, host_id: str) -> BookingPolicy:
        with self._locks.get(host_id):
            payload = self._load(host_id).get("policy")
        if not payload:
            return self._default_policy
        return BookingPolicy.from_payload(payload)

    def write_availability(self, host_id: str, availability: Availability) -> None:
        with self._locks.get(host_id):
            data = self._load(host_id)
            data["availability"] = availability.to_payload()
            _save_json(_host_file(self._data_dir, host_id), data)

    def write_policy(self, host_id: str, policy: BookingPolicy) -> None:
        with self._locks.get(host_id):
            data = self._load(host_id)
            data["policy"] = policy.to_payload()
            _save_json(_host_file(self._data_dir, host_id), data)


def serialize_booking(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "host_id": booking.host_id,
        "guest_name": booking.guest_name,
        "guest_email": booking.guest_email,
        "notes": booking.notes,
        "start": booking.start.isoformat(),
        "duration": booking.duration,
        "status": booking.status.value,
        "meeting_link": booking.meeting_link,
        "created_at": booking.created_at.isoformat(),
    }


def deserialize_booking(data: dict[str, Any]) -> Booking:
    return Booking(
        id=data["id"],
        host_id=data["host_id"],
        guest_name=data["guest_name"],
        guest_email=data["guest_email"],
        notes=data.get("notes"),
        start=datetime.fromisoformat(data["start"]),
        duration=int(data["duration"]),
        status=BookingStatus(data.get("status", "confirmed")),
        meeting_link=data["meeting_link"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )


class JsonBookingLedger(BookingLedgerPort):
    """One JSON document per host; writes are serialized by a per-host lock."""

    def __init__(self, data_dir: str = "./data/bookings") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks = _HostLocks()

    def _load_host(self, host_id: str) -> list[Booking]:
        data = _load_json(_host_file(self._data_dir, host_id), strict=True) or {}
        bookings = [deserialize_booking(item) for item in data.get("bookings", [])]
        return sorted(bookings, key=lambda b: b.start)

    def _save_host(self, host_id: str, bookings: list[Booking]) -> None:
        data = {
            "host_id": host_id,
            "bookings": [serialize_booking(b) for b in bookings],
            "version": 1,
        }
        _save_json(_host_file(self._data_dir, host_id), data)

    def read_confirmed_bookings(self, host_id: str, start: datetime, end: datetime) -> list[Booking]:
        with self._locks.get(host_id):
            bookings = self._load_host(host_id)
        return [b for b in bookings if b.is_confirmed and b.start < end and b.end > start]

    def list_bookings(self, host_id: str) -> list[Booking]:
        with self._locks.get(host_id):
            return self._load_host(host_id)

    def _find_host(self, booking_id: str) -> str | None:
        # Scans every host file; fine for the volumes a single node serves.
        for file_path in self._data_dir.glob("*.json"):
            data = _load_json(file_path, strict=True) or {}
            for item in data.get("bookings", []):
                if item.get("id") == booking_id:
                    return data.get("host_id") or file_path.stem
        return None

    def get_booking(self, booking_id: str) -> Booking | None:
        host_id = self._find_host(booking_id)
        if host_id is None:
            return None
        return next((b for b in self.list_bookings(host_id) if b.id == booking_id), None)

    def append_booking(self, booking: Booking, precondition: Precondition | None = None) -> Booking:
        with self._locks.get(booking.host_id):
            bookings = self._load_host(booking.host_id)
            if any(b.id == booking.id for b in bookings):
                raise ValueError(f"Duplicate booking id {booking.id}")
            if precondition is not None:
                precondition([b for b in bookings if b.is_confirmed])
            bookings.append(booking)
            self._save_host(booking.host_id, bookings)
            return booking

    def mark_cancelled(self, booking_id: str) -> Booking | None:
        host_id = self._find_host(booking_id)
        if host_id is None:
            return None
        with self._locks.get(host_id):
            bookings = self._load_host(host_id)
            for index, booking in enumerate(bookings):
                if booking.id != booking_id:
                    continue
                if booking.is_confirmed:
                    booking = booking.cancelled()
                    bookings[index] = booking
                    self._save_host(host_id, bookings)
                return booking
        return None
