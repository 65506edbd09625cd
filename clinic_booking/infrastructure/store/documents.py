"""
Mapping between document-database records and domain entities.

Documents use the portal's camelCase field names, e.g. a doctor:

    {
        "id": "doc-1",
        "name": "Dr. Adams",
        "workingDays": ["Mon", "Tue"],
        "workingHours": {"Mon": {"start": "09:00", "end": "17:00"}},
        "slotInterval": 30,
        "assignedTreatments": ["t-1"],
        "assignedLocations": ["loc-1"],
        "status": "active"
    }

Appointment start/end are ISO 8601 local wall-clock strings.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from clinic_booking.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    ConsultationType,
    NewAppointment,
)
from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.schedule import Weekday, WorkingHour
from clinic_booking.domain.entities.treatment import Treatment


def doctor_from_document(doc: dict[str, Any]) -> Doctor:
    working_hours = {
        Weekday(day): WorkingHour.parse(hours["start"], hours["end"])
        for day, hours in (doc.get("workingHours") or {}).items()
        if hours
    }
    return Doctor(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        working_days=frozenset(Weekday(day) for day in doc.get("workingDays", [])),
        working_hours=working_hours,
        slot_interval=int(doc.get("slotInterval", 0)),
        assigned_treatments=frozenset(doc.get("assignedTreatments", [])),
        assigned_locations=frozenset(doc.get("assignedLocations", [])),
        status=doc.get("status", "active"),
    )


def treatment_from_document(doc: dict[str, Any]) -> Treatment:
    return Treatment(id=str(doc["id"]), name=doc.get("name", ""), duration=int(doc.get("duration", 0)))


def appointment_from_document(doc: dict[str, Any]) -> Appointment:
    return Appointment(
        id=str(doc["id"]),
        doctor_id=doc["doctorId"],
        patient_id=doc["patientId"],
        start=_parse_instant(doc["start"]),
        end=_parse_instant(doc["end"]),
        status=AppointmentStatus(doc.get("status", AppointmentStatus.REGISTERED.value)),
        consultation_type=ConsultationType(doc.get("consultationType", ConsultationType.DIRECT.value)),
        treatment_name=doc.get("treatmentName"),
        location_id=doc.get("locationId"),
    )


def new_appointment_to_document(data: NewAppointment) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "doctorId": data.doctor_id,
        "patientId": data.patient_id,
        "start": data.start.isoformat(),
        "end": data.end.isoformat(),
        "status": data.status.value,
        "consultationType": data.consultation_type.value,
    }
    if data.treatment_name:
        doc["treatmentName"] = data.treatment_name
    if data.location_id:
        doc["locationId"] = data.location_id
    return doc


def _parse_instant(value: str) -> datetime:
    # Wall-clock time: any offset the backend attaches is dropped, not converted.
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
