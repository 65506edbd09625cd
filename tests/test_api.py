"""
Tests for the HTTP surface.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from clinic_booking.application.exceptions import StoreRequestError, StoreUnavailableError
from clinic_booking.application.use_cases.booking import BookingCoordinator
from clinic_booking.domain.entities.schedule import Weekday
from clinic_booking.infrastructure.store.memory_store import MemoryClinicStore
from clinic_booking.main import app
from clinic_booking.wiring.dependencies import get_booking_coordinator

from factories import make_appointment, make_doctor, make_treatment


class DownStore(MemoryClinicStore):
    async def get_appointments_in_range(self, doctor_id, range_start, range_end):
        raise StoreUnavailableError("backend down")


class RejectingStore(MemoryClinicStore):
    async def get_appointments_in_range(self, doctor_id, range_start, range_end):
        raise StoreRequestError("unauthorized")


@pytest.fixture
def store():
    return MemoryClinicStore(
        doctors=[make_doctor(hours={Weekday.MON: ("09:00", "14:00")})],
        treatments=[make_treatment(duration=60)],
        appointments=[make_appointment("10:00", "11:00", appointment_id="taken")],
    )


@pytest.fixture
def client(store):
    app.dependency_overrides[get_booking_coordinator] = lambda: BookingCoordinator(store, store)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _booking(**overrides):
    body = {
        "doctor_id": "doc-1",
        "date": "2026-03-02",
        "slot_start": "09:00",
        "treatment_id": "t-30",
        "patient_id": "p-1",
        "consultation_type": "direct",
    }
    body.update(overrides)
    return body


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_slots_groups_morning_and_afternoon(client):
    response = client.get("/api/v1/doctors/doc-1/slots", params={"date": "2026-03-02", "treatment_id": "t-30"})

    assert response.status_code == 200
    assert response.json() == {
        "slots": ["09:00", "11:00", "11:30", "12:00", "12:30", "13:00"],
        "reason": None,
        "morning": ["09:00", "11:00", "11:30"],
        "afternoon": ["12:00", "12:30", "13:00"],
    }


def test_list_slots_on_closed_day(client):
    response = client.get("/api/v1/doctors/doc-1/slots", params={"date": "2026-03-03", "treatment_id": "t-30"})

    assert response.status_code == 200
    assert response.json()["reason"] == "no-working-hours"
    assert response.json()["slots"] == []


def test_list_slots_unknown_doctor(client):
    response = client.get("/api/v1/doctors/nobody/slots", params={"date": "2026-03-02", "treatment_id": "t-30"})

    assert response.status_code == 404


def test_list_slots_requires_date(client):
    response = client.get("/api/v1/doctors/doc-1/slots", params={"treatment_id": "t-30"})

    assert response.status_code == 422


def test_book_slot(client, store):
    response = client.post("/api/v1/appointments", json=_booking(consultation_type="online"))

    assert response.status_code == 201
    data = response.json()
    assert data["start"] == "2026-03-02T09:00:00"
    assert data["end"] == "2026-03-02T10:00:00"
    assert data["status"] == "Registered"
    assert data["consultation_type"] == "online"
    assert len(store.all_appointments()) == 2


def test_book_taken_slot_is_409(client):
    response = client.post("/api/v1/appointments", json=_booking(slot_start="10:30"))

    assert response.status_code == 409
    assert response.json()["conflicting_ids"] == ["taken"]


def test_book_outside_working_hours_is_400(client):
    response = client.post("/api/v1/appointments", json=_booking(slot_start="13:30"))

    assert response.status_code == 400


def test_book_with_unknown_consultation_type_is_422(client):
    response = client.post("/api/v1/appointments", json=_booking(consultation_type="home"))

    assert response.status_code == 422


def test_store_down_is_503():
    store = DownStore(doctors=[make_doctor()], treatments=[make_treatment()])
    app.dependency_overrides[get_booking_coordinator] = lambda: BookingCoordinator(store, store)
    try:
        response = TestClient(app).post("/api/v1/appointments", json=_booking())
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503


def test_configuration_error_is_500():
    store = MemoryClinicStore(doctors=[make_doctor(slot_interval=0)], treatments=[make_treatment()])
    app.dependency_overrides[get_booking_coordinator] = lambda: BookingCoordinator(store, store)
    try:
        response = TestClient(app).get(
            "/api/v1/doctors/doc-1/slots", params={"date": "2026-03-02", "treatment_id": "t-30"}
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500


def test_store_rejection_is_502():
    store = RejectingStore(doctors=[make_doctor()], treatments=[make_treatment()])
    app.dependency_overrides[get_booking_coordinator] = lambda: BookingCoordinator(store, store)
    try:
        response = TestClient(app).post("/api/v1/appointments", json=_booking())
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
