from __future__ import annotations

import random

import pytest

from bookly.domain.entities.policy import BookingPolicy
from bookly.infrastructure.links.meeting_link import MeetLinkGenerator
from bookly.infrastructure.store.memory_store import MemoryBookingLedger, MemoryProfileStore
from tests.helpers import HOST, TZ_NAME, monday_availability


@pytest.fixture
def profiles() -> MemoryProfileStore:
    store = MemoryProfileStore(default_timezone=TZ_NAME)
    store.write_availability(HOST, monday_availability())
    store.write_policy(HOST, BookingPolicy(slot_duration=30))
    return store


@pytest.fixture
def ledger() -> MemoryBookingLedger:
    return MemoryBookingLedger()


@pytest.fixture
def links() -> MeetLinkGenerator:
    return MeetLinkGenerator(rng=random.Random(7))
