from pathlib import Path

from bookly.core.config import settings
from bookly.application.ports.booking_ledger import BookingLedgerPort
from bookly.application.ports.meeting_link import MeetingLinkPort
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.application.use_cases.cancel_booking import CancelBookingUseCase
from bookly.application.use_cases.create_booking import CreateBookingUseCase
from bookly.application.use_cases.generate_slots import GenerateSlotsUseCase
from bookly.application.use_cases.update_profile import UpdateProfileUseCase
from bookly.domain.entities.policy import BookingPolicy
from bookly.infrastructure.links.meeting_link import MeetLinkGenerator
from bookly.infrastructure.store.json_store import JsonBookingLedger, JsonProfileStore
from bookly.infrastructure.store.memory_store import MemoryBookingLedger, MemoryProfileStore


_profile_store: ProfileStorePort | None = None
_booking_ledger: BookingLedgerPort | None = None


def _use_json_stores() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def _default_policy() -> BookingPolicy:
    return BookingPolicy(slot_duration=settings.DEFAULT_SLOT_DURATION_MINUTES)


def get_profile_store() -> ProfileStorePort:
    global _profile_store
    if _profile_store is None:
        if _use_json_stores():
            _profile_store = JsonProfileStore(
                data_dir=str(Path(settings.DATA_DIR) / "profiles"),
                default_timezone=settings.DEFAULT_TIMEZONE,
                default_policy=_default_policy(),
            )
        else:
            _profile_store = MemoryProfileStore(
                default_timezone=settings.DEFAULT_TIMEZONE,
                default_policy=_default_policy(),
            )
    return _profile_store


def get_booking_ledger() -> BookingLedgerPort:
    global _booking_ledger
    if _booking_ledger is None:
        if _use_json_stores():
            _booking_ledger = JsonBookingLedger(data_dir=str(Path(settings.DATA_DIR) / "bookings"))
        else:
            _booking_ledger = MemoryBookingLedger()
    return _booking_ledger


def get_meeting_links() -> MeetingLinkPort:
    return MeetLinkGenerator(base_url=settings.MEETING_LINK_BASE_URL)


def get_generate_slots_use_case() -> GenerateSlotsUseCase:
    return GenerateSlotsUseCase(
        profiles=get_profile_store(),
        ledger=get_booking_ledger(),
        max_range_days=settings.MAX_SLOT_RANGE_DAYS,
    )


def get_create_booking_use_case() -> CreateBookingUseCase:
    return CreateBookingUseCase(
        profiles=get_profile_store(),
        ledger=get_booking_ledger(),
        links=get_meeting_links(),
    )


def get_cancel_booking_use_case() -> CancelBookingUseCase:
    return CancelBookingUseCase(ledger=get_booking_ledger())


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase(profiles=get_profile_store(), default_timezone=settings.DEFAULT_TIMEZONE)
