"""
Tests for the REST document-database adapter, using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from clinic_booking.application.exceptions import SlotConflict, StoreRequestError, StoreUnavailableError
from clinic_booking.core.config import settings
from clinic_booking.domain.entities.appointment import AppointmentStatus, ConsultationType, NewAppointment
from clinic_booking.domain.entities.schedule import Weekday
from clinic_booking.infrastructure.store.document_api_store import DocumentApiStore
from clinic_booking.wiring.dependencies import close_clinic_store, get_clinic_store

from factories import at

BASE_URL = "https://docs.example.test/v1"

DOCTOR_DOC = {
    "id": "doc-1",
    "name": "Dr. Adams",
    "workingDays": ["Mon", "Fri"],
    "workingHours": {"Mon": {"start": "09:00", "end": "11:00"}},
    "slotInterval": 30,
    "assignedTreatments": ["t-30"],
    "assignedLocations": ["main"],
    "status": "active",
}


def _store(handler) -> DocumentApiStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DocumentApiStore(base_url=BASE_URL, api_key="secret", client=client)


def test_get_doctor_decodes_document():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return httpx.Response(200, json=DOCTOR_DOC)

    doctor = asyncio.run(_store(handler).get_doctor("doc-1"))

    assert seen == {"auth": "Bearer secret", "path": "/v1/doctors/doc-1"}
    assert doctor.working_days == frozenset({Weekday.MON, Weekday.FRI})
    assert Weekday.FRI not in doctor.working_hours
    assert doctor.offers("t-30")


def test_missing_documents_return_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"detail": "not found"})

    store = _store(handler)

    assert asyncio.run(store.get_doctor("nobody")) is None
    assert asyncio.run(store.get_treatment("nothing")) is None


def test_range_query_sends_doctor_and_bounds():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "appointments": [
                    {
                        "id": "a-1",
                        "doctorId": "doc-1",
                        "patientId": "p-1",
                        "start": "2026-03-02T10:00:00Z",
                        "end": "2026-03-02T10:30:00Z",
                        "status": "Cancelled",
                    }
                ]
            },
        )

    result = asyncio.run(_store(handler).get_appointments_in_range("doc-1", at("00:00"), at("23:59")))

    assert seen == {"doctorId": "doc-1", "start": "2026-03-02T00:00:00", "end": "2026-03-02T23:59:00"}
    assert result[0].start == at("10:00")
    assert result[0].status == AppointmentStatus.CANCELLED
    assert not result[0].occupies_time


def test_create_posts_document():
    posted = {}

    def handler(request: httpx.Request) -> httpx.Response:
        posted.update(json.loads(request.content))
        return httpx.Response(201, json={"id": "new-1", **posted})

    data = NewAppointment(
        doctor_id="doc-1",
        patient_id="p-1",
        start=at("09:00"),
        end=at("09:30"),
        consultation_type=ConsultationType.ONLINE,
        treatment_name="Consult",
    )

    appointment = asyncio.run(_store(handler).create_appointment(data))

    assert posted["status"] == "Registered"
    assert posted["consultationType"] == "online"
    assert posted["start"] == "2026-03-02T09:00:00"
    assert "locationId" not in posted
    assert appointment.id == "new-1"
    assert appointment.end == at("09:30")


def test_store_side_conflict():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"detail": "overlap"})

    data = NewAppointment(doctor_id="doc-1", patient_id="p-1", start=at("09:00"), end=at("09:30"))

    with pytest.raises(SlotConflict):
        asyncio.run(_store(handler).create_appointment(data))


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(503, json={"detail": "down"}),
        lambda request: httpx.Response(200, content=b"not json"),
        lambda request: httpx.Response(200, json={"appointments": [{"id": "broken"}]}),
    ],
)
def test_backend_failures_become_store_unavailable(handler):
    with pytest.raises(StoreUnavailableError):
        asyncio.run(_store(handler).get_appointments_in_range("doc-1", at("00:00"), at("23:59")))


def test_network_error_becomes_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StoreUnavailableError):
        asyncio.run(_store(handler).get_doctor("doc-1"))


def test_base_url_is_required():
    with pytest.raises(ValueError):
        DocumentApiStore(base_url="", client=httpx.AsyncClient())


@pytest.mark.parametrize("status_code", [400, 401, 422])
def test_rejected_requests_are_not_retryable(status_code):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"detail": "rejected"})

    with pytest.raises(StoreRequestError):
        asyncio.run(_store(handler).get_appointments_in_range("doc-1", at("00:00"), at("23:59")))


def test_server_errors_stay_retryable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "boom"})

    with pytest.raises(StoreUnavailableError) as exc_info:
        asyncio.run(_store(handler).get_doctor("doc-1"))
    assert not isinstance(exc_info.value, StoreRequestError)


def test_close_clinic_store_closes_http_client(monkeypatch):
    monkeypatch.setattr(settings, "STORE_PROVIDER", "document_api")
    monkeypatch.setattr(settings, "DOCUMENT_API_URL", BASE_URL)
    get_clinic_store.cache_clear()
    try:
        store = get_clinic_store()
        assert isinstance(store, DocumentApiStore)

        asyncio.run(close_clinic_store())

        assert store._client.is_closed
        assert get_clinic_store.cache_info().currsize == 0
    finally:
        get_clinic_store.cache_clear()
