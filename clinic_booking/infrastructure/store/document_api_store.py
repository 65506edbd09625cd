from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from clinic_booking.application.exceptions import SlotConflict, StoreRequestError, StoreUnavailableError
from clinic_booking.application.ports.appointment_store import AppointmentStorePort
from clinic_booking.application.ports.clinic_directory import ClinicDirectoryPort
from clinic_booking.core.config import settings
from clinic_booking.domain.entities.appointment import Appointment, NewAppointment
from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.treatment import Treatment
from clinic_booking.infrastructure.store.documents import (
    appointment_from_document,
    doctor_from_document,
    new_appointment_to_document,
    treatment_from_document,
)


class DocumentApiStore(AppointmentStorePort, ClinicDirectoryPort):
    """Reads and writes the portal's document database through its REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.DOCUMENT_API_URL or "").rstrip("/")
        self._api_key = api_key or settings.DOCUMENT_API_KEY
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.DOCUMENT_API_TIMEOUT)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("DOCUMENT_API_URL is required for the document API store")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_doctor(self, doctor_id: str) -> Doctor | None:
        doc = await self._get_document(f"/doctors/{doctor_id}")
        if doc is None:
            return None
        return self._decode(doctor_from_document, doc, "doctor")

    async def get_treatment(self, treatment_id: str) -> Treatment | None:
        doc = await self._get_document(f"/treatments/{treatment_id}")
        if doc is None:
            return None
        return self._decode(treatment_from_document, doc, "treatment")

    async def get_appointments_in_range(
        self,
        doctor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> list[Appointment]:
        params = {
            "doctorId": doctor_id,
            "start": range_start.isoformat(),
            "end": range_end.isoformat(),
        }
        response = await self._request("GET", "/appointments", params=params)
        data = self._json(response)
        items = data.get("appointments", []) if isinstance(data, dict) else data
        return [self._decode(appointment_from_document, item, "appointment") for item in items]

    async def create_appointment(self, data: NewAppointment) -> Appointment:
        response = await self._request(
            "POST",
            "/appointments",
            json=new_appointment_to_document(data),
            allowed_statuses=(409,),
        )
        if response.status_code == 409:
            raise SlotConflict("The store rejected an overlapping appointment")

        appointment = self._decode(appointment_from_document, self._json(response), "appointment")
        self._logger.info(
            "Appointment document created",
            extra={"appointment_id": appointment.id, "doctor_id": appointment.doctor_id},
        )
        return appointment

    async def _get_document(self, path: str) -> dict[str, Any] | None:
        response = await self._request("GET", path, allowed_statuses=(404,))
        if response.status_code == 404:
            return None
        return self._json(response)

    async def _request(
        self,
        method: str,
        path: str,
        allowed_statuses: tuple[int, ...] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
            if response.status_code in allowed_statuses:
                return response
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            if e.response.status_code < 500:
                self._logger.error(
                    "Document API rejected request",
                    extra={"error": str(e), "reason": e.response.status_code},
                )
                raise StoreRequestError(f"Document API {method} {path} rejected: {e}") from e
            self._logger.exception("Document API request failed", extra={"error": str(e)})
            raise StoreUnavailableError(f"Document API {method} {path} failed: {e}") from e
        except httpx.HTTPError as e:
            self._logger.exception("Document API request failed", extra={"error": str(e)})
            raise StoreUnavailableError(f"Document API {method} {path} failed: {e}") from e

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            self._logger.error("Document API returned invalid JSON", extra={"error": str(e)})
            raise StoreUnavailableError("Document API returned invalid JSON") from e

    def _decode(self, decoder, doc: dict[str, Any], kind: str):
        try:
            return decoder(doc)
        except (KeyError, TypeError, ValueError) as e:
            self._logger.error("Malformed document", extra={"error": str(e), "reason": kind})
            raise StoreUnavailableError(f"Malformed {kind} document from document API") from e
