from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from bookly.api.v1.schemas import (
    AvailabilitySchema,
    BookingRequestSchema,
    BookingSchema,
    LegacyProfileSchema,
    PolicySchema,
    ReminderSchema,
    SlotListSchema,
    SlotSchema,
    StatsSchema,
)
from bookly.application.exceptions import ConflictError, NotFoundError
from bookly.application.ports.booking_ledger import BookingLedgerPort
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.application.use_cases.booking_overview import booking_stats, minutes_until, upcoming_reminder
from bookly.application.use_cases.cancel_booking import CancelBookingUseCase
from bookly.application.use_cases.create_booking import CreateBookingUseCase
from bookly.application.use_cases.generate_slots import GenerateSlotsUseCase
from bookly.application.use_cases.update_profile import UpdateProfileUseCase
from bookly.application.utils.validation import load_timezone
from bookly.core.config import settings
from bookly.domain.entities.booking import Slot
from bookly.wiring.dependencies import (
    get_booking_ledger,
    get_cancel_booking_use_case,
    get_create_booking_use_case,
    get_generate_slots_use_case,
    get_profile_store,
    get_update_profile_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/hosts/{host_id}/availability", response_model=AvailabilitySchema)
def read_availability(host_id: str, profiles: ProfileStorePort = Depends(get_profile_store)):
    try:
        availability = profiles.read_availability(host_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AvailabilitySchema.from_entity(availability)


@router.put("/hosts/{host_id}/availability", response_model=AvailabilitySchema)
def update_availability(
    host_id: str,
    req: AvailabilitySchema,
    uc: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    try:
        availability = uc.set_availability(host_id, req.to_entity())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AvailabilitySchema.from_entity(availability)


@router.post("/hosts/{host_id}/availability/legacy", response_model=AvailabilitySchema)
def migrate_legacy_availability(
    host_id: str,
    req: LegacyProfileSchema,
    uc: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    try:
        availability, _ = uc.migrate_legacy(host_id, req.availability, req.settings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AvailabilitySchema.from_entity(availability)


@router.get("/hosts/{host_id}/policy", response_model=PolicySchema)
def read_policy(host_id: str, profiles: ProfileStorePort = Depends(get_profile_store)):
    try:
        policy = profiles.read_policy(host_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PolicySchema.from_entity(policy)


@router.put("/hosts/{host_id}/policy", response_model=PolicySchema)
def update_policy(
    host_id: str,
    req: PolicySchema,
    uc: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    try:
        policy = uc.set_policy(host_id, req.to_entity())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PolicySchema.from_entity(policy)


@router.get("/hosts/{host_id}/slots", response_model=SlotListSchema)
def list_slots(
    host_id: str,
    start: date = Query(...),
    end: date | None = Query(None, description="Exclusive; defaults to start + 7 days"),
    uc: GenerateSlotsUseCase = Depends(get_generate_slots_use_case),
    profiles: ProfileStorePort = Depends(get_profile_store),
):
    end = end or start + timedelta(days=7)
    try:
        slots = uc.execute(host_id, start, end)
        tz_name = profiles.read_availability(host_id).timezone
        tz = load_timezone(tz_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SlotListSchema(
        host_id=host_id,
        timezone=tz_name,
        slots=[SlotSchema.from_entity(slot, tz) for slot in slots],
    )


@router.post("/hosts/{host_id}/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    host_id: str,
    req: BookingRequestSchema,
    uc: CreateBookingUseCase = Depends(get_create_booking_use_case),
):
    now = datetime.now(timezone.utc)
    try:
        booking = uc.execute(
            host_id=host_id,
            slot=Slot(start=req.start, end=req.end),
            guest_name=req.guest_name,
            guest_email=req.guest_email,
            notes=req.notes,
            now=now,
        )
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookingSchema.from_entity(booking, now)


@router.get("/hosts/{host_id}/bookings", response_model=list[BookingSchema])
def list_bookings(host_id: str, ledger: BookingLedgerPort = Depends(get_booking_ledger)):
    now = datetime.now(timezone.utc)
    try:
        bookings = ledger.list_bookings(host_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [BookingSchema.from_entity(b, now) for b in bookings]


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def read_booking(booking_id: str, ledger: BookingLedgerPort = Depends(get_booking_ledger)):
    booking = ledger.get_booking(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail=f"booking {booking_id} not found")
    return BookingSchema.from_entity(booking, datetime.now(timezone.utc))


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(booking_id: str, uc: CancelBookingUseCase = Depends(get_cancel_booking_use_case)):
    try:
        booking = uc.execute(booking_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return BookingSchema.from_entity(booking, datetime.now(timezone.utc))


@router.get("/hosts/{host_id}/stats", response_model=StatsSchema)
def read_stats(
    host_id: str,
    ledger: BookingLedgerPort = Depends(get_booking_ledger),
    profiles: ProfileStorePort = Depends(get_profile_store),
):
    try:
        tz = load_timezone(profiles.read_availability(host_id).timezone)
        bookings = ledger.list_bookings(host_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    stats = booking_stats(bookings, datetime.now(timezone.utc), tz)
    return StatsSchema.from_entity(stats)


@router.get("/hosts/{host_id}/reminder", response_model=ReminderSchema)
def read_reminder(
    host_id: str,
    lead_minutes: int = Query(settings.REMINDER_LEAD_MINUTES, ge=0),
    ledger: BookingLedgerPort = Depends(get_booking_ledger),
):
    now = datetime.now(timezone.utc)
    try:
        bookings = ledger.list_bookings(host_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    booking = upcoming_reminder(bookings, now, lead_minutes)
    if booking is None:
        return ReminderSchema()
    return ReminderSchema(
        booking=BookingSchema.from_entity(booking, now),
        minutes_until=minutes_until(booking, now),
    )
