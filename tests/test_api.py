"""
HTTP tests for the scheduling API, run against in-memory and JSON stores.
"""

from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from bookly.application.use_cases.cancel_booking import CancelBookingUseCase
from bookly.application.use_cases.create_booking import CreateBookingUseCase
from bookly.application.use_cases.generate_slots import GenerateSlotsUseCase
from bookly.application.use_cases.update_profile import UpdateProfileUseCase
from bookly.infrastructure.links.meeting_link import MeetLinkGenerator
from bookly.infrastructure.store.json_store import JsonBookingLedger, JsonProfileStore
from bookly.infrastructure.store.memory_store import MemoryBookingLedger, MemoryProfileStore
from bookly.main import app
from bookly.wiring import dependencies as deps

# Far enough ahead that the real clock never reaches it.
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"

AVAILABILITY = {
    "timezone": "UTC",
    "weekly_schedule": {"monday": [{"start": "09:00", "end": "12:00"}]},
    "exceptional_dates": [],
}


@pytest.fixture
def client():
    profiles = MemoryProfileStore(default_timezone="UTC")
    ledger = MemoryBookingLedger()
    links = MeetLinkGenerator(rng=random.Random(3))

    app.dependency_overrides = {
        deps.get_profile_store: lambda: profiles,
        deps.get_booking_ledger: lambda: ledger,
        deps.get_generate_slots_use_case: lambda: GenerateSlotsUseCase(profiles=profiles, ledger=ledger),
        deps.get_create_booking_use_case: lambda: CreateBookingUseCase(profiles=profiles, ledger=ledger, links=links),
        deps.get_cancel_booking_use_case: lambda: CancelBookingUseCase(ledger=ledger),
        deps.get_update_profile_use_case: lambda: UpdateProfileUseCase(profiles=profiles),
    }
    with TestClient(app) as c:
        yield c
    app.dependency_overrides = {}


def _setup_host(client: TestClient, host: str = "ada") -> None:
    assert client.put(f"/api/v1/hosts/{host}/availability", json=AVAILABILITY).status_code == 200
    policy = {"slot_duration": 30, "buffer_before": 0, "buffer_after": 0, "min_notice_minutes": 0}
    assert client.put(f"/api/v1/hosts/{host}/policy", json=policy).status_code == 200


def _book(client: TestClient, start: str, end: str, host: str = "ada"):
    return client.post(
        f"/api/v1/hosts/{host}/bookings",
        json={"start": start, "end": end, "guest_name": "Grace", "guest_email": "grace@example.com"},
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_availability_round_trip(client):
    _setup_host(client)
    data = client.get("/api/v1/hosts/ada/availability").json()
    assert data["timezone"] == "UTC"
    assert data["weekly_schedule"]["monday"] == [{"start": "09:00", "end": "12:00"}]
    assert data["weekly_schedule"]["tuesday"] == []


def test_invalid_availability_is_rejected(client):
    overlapping = {
        "timezone": "UTC",
        "weekly_schedule": {"monday": [{"start": "09:00", "end": "12:00"}, {"start": "11:00", "end": "13:00"}]},
    }
    response = client.put("/api/v1/hosts/ada/availability", json=overlapping)
    assert response.status_code == 400

    unknown_field = {**AVAILABILITY, "vacation": True}
    assert client.put("/api/v1/hosts/ada/availability", json=unknown_field).status_code == 422


def test_invalid_policy_is_rejected(client):
    assert client.put("/api/v1/hosts/ada/policy", json={"slot_duration": 0}).status_code == 422
    assert client.put("/api/v1/hosts/ada/policy", json={"location": "Zoom"}).status_code == 422


def test_slot_listing_and_booking_flow(client):
    _setup_host(client)

    slots = client.get("/api/v1/hosts/ada/slots", params={"start": MONDAY, "end": TUESDAY}).json()
    assert slots["timezone"] == "UTC"
    assert len(slots["slots"]) == 6
    first = slots["slots"][0]
    assert first["start"].startswith("2030-01-07T09:00:00")

    response = _book(client, first["start"], first["end"])
    assert response.status_code == 201
    booking = response.json()
    assert booking["status"] == "confirmed"
    assert booking["meeting_link"].startswith("https://meet.google.com/")

    assert _book(client, first["start"], first["end"]).status_code == 409

    remaining = client.get("/api/v1/hosts/ada/slots", params={"start": MONDAY, "end": TUESDAY}).json()
    assert len(remaining["slots"]) == 5

    listed = client.get("/api/v1/hosts/ada/bookings").json()
    assert [b["id"] for b in listed] == [booking["id"]]
    assert client.get(f"/api/v1/bookings/{booking['id']}").json()["guest_name"] == "Grace"


def test_cancel_flow(client):
    _setup_host(client)
    booking = _book(client, "2030-01-07T10:00:00+00:00", "2030-01-07T10:30:00+00:00").json()

    first = client.post(f"/api/v1/bookings/{booking['id']}/cancel")
    second = client.post(f"/api/v1/bookings/{booking['id']}/cancel")

    assert first.status_code == 200
    assert first.json()["status"] == "cancelled"
    assert second.json() == first.json()
    assert client.post("/api/v1/bookings/missing/cancel").status_code == 404
    assert client.get("/api/v1/bookings/missing").status_code == 404
    assert _book(client, "2030-01-07T10:00:00+00:00", "2030-01-07T10:30:00+00:00").status_code == 201


def test_bad_booking_requests(client):
    _setup_host(client)
    # Naive datetimes are refused by validation.
    assert _book(client, "2030-01-07T09:00:00", "2030-01-07T09:30:00").status_code == 422
    # Off-grid slot.
    assert _book(client, "2030-01-07T09:10:00+00:00", "2030-01-07T09:40:00+00:00").status_code == 400
    # Bad email.
    response = client.post(
        "/api/v1/hosts/ada/bookings",
        json={
            "start": "2030-01-07T09:00:00+00:00",
            "end": "2030-01-07T09:30:00+00:00",
            "guest_name": "Grace",
            "guest_email": "not-an-email",
        },
    )
    assert response.status_code == 422


def test_bad_slot_ranges(client):
    _setup_host(client)
    assert client.get("/api/v1/hosts/ada/slots", params={"start": TUESDAY, "end": MONDAY}).status_code == 400
    assert client.get("/api/v1/hosts/ada/slots", params={"start": MONDAY, "end": "2031-01-01"}).status_code == 400


def test_legacy_migration_endpoint(client):
    payload = {
        "availability": {"days": ["Monday"], "hours": {"start": "10:00", "end": "11:00"}, "timezone": "UTC"},
        "settings": {"bufferBefore": 0, "bufferAfter": 0, "minNoticeTime": 0, "limitPerDay": 1},
    }
    response = client.post("/api/v1/hosts/lin/availability/legacy", json=payload)
    assert response.status_code == 200
    assert response.json()["weekly_schedule"]["monday"] == [{"start": "10:00", "end": "11:00"}]
    assert client.get("/api/v1/hosts/lin/policy").json()["limit_per_day"] == 1

    slots = client.get("/api/v1/hosts/lin/slots", params={"start": MONDAY, "end": TUESDAY}).json()["slots"]
    assert len(slots) == 2
    assert _book(client, slots[0]["start"], slots[0]["end"], host="lin").status_code == 201
    assert client.get("/api/v1/hosts/lin/slots", params={"start": MONDAY, "end": TUESDAY}).json()["slots"] == []
    assert _book(client, slots[1]["start"], slots[1]["end"], host="lin").status_code == 409


def test_stats_and_reminder(client):
    _setup_host(client)
    _book(client, "2030-01-07T09:00:00+00:00", "2030-01-07T09:30:00+00:00")

    stats = client.get("/api/v1/hosts/ada/stats").json()
    assert stats["total"] == 1
    assert stats["upcoming"] == 1
    assert stats["month_trend"] == 0

    reminder = client.get("/api/v1/hosts/ada/reminder").json()
    assert reminder == {"booking": None, "minutes_until": None}


@pytest.fixture
def json_client(tmp_path):
    profiles = JsonProfileStore(data_dir=str(tmp_path / "profiles"), default_timezone="UTC")
    ledger = JsonBookingLedger(data_dir=str(tmp_path / "bookings"))
    links = MeetLinkGenerator(rng=random.Random(5))

    app.dependency_overrides = {
        deps.get_profile_store: lambda: profiles,
        deps.get_booking_ledger: lambda: ledger,
        deps.get_generate_slots_use_case: lambda: GenerateSlotsUseCase(profiles=profiles, ledger=ledger),
        deps.get_create_booking_use_case: lambda: CreateBookingUseCase(profiles=profiles, ledger=ledger, links=links),
        deps.get_cancel_booking_use_case: lambda: CancelBookingUseCase(ledger=ledger),
        deps.get_update_profile_use_case: lambda: UpdateProfileUseCase(profiles=profiles),
    }
    with TestClient(app) as c:
        yield c, tmp_path
    app.dependency_overrides = {}


@pytest.mark.parametrize("suffix", ["availability", "policy", "bookings", "stats", "reminder"])
def test_invalid_host_id_is_a_bad_request(json_client, suffix):
    client, _ = json_client
    response = client.get(f"/api/v1/hosts/bad$id/{suffix}")
    assert response.status_code == 400


def test_corrupted_ledger_is_service_unavailable(json_client):
    client, tmp_path = json_client
    _setup_host(client)
    assert _book(client, "2030-01-07T09:00:00+00:00", "2030-01-07T09:30:00+00:00").status_code == 201

    ledger_file = tmp_path / "bookings" / "ada.json"
    ledger_file.write_text("{\"host_id\": \"ada\", \"bookings\": [", encoding="utf-8")

    assert _book(client, "2030-01-07T09:00:00+00:00", "2030-01-07T09:30:00+00:00").status_code == 503
    assert client.get("/api/v1/hosts/ada/bookings").status_code == 503
    assert ledger_file.read_text(encoding="utf-8") == "{\"host_id\": \"ada\", \"bookings\": ["


def test_weekday_given_twice_is_rejected(client):
    payload = {
        "timezone": "UTC",
        "weekly_schedule": {
            "Monday": [{"start": "09:00", "end": "12:00"}],
            " monday": [{"start": "13:00", "end": "17:00"}],
        },
    }
    assert client.put("/api/v1/hosts/ada/availability", json=payload).status_code == 400
