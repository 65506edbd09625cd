from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from clinic_booking.application.exceptions import SlotConflict
from clinic_booking.application.ports.appointment_store import AppointmentStorePort
from clinic_booking.application.ports.clinic_directory import ClinicDirectoryPort
from clinic_booking.application.scheduling.availability import find_conflicts, overlaps
from clinic_booking.domain.entities.appointment import Appointment, NewAppointment
from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.treatment import Treatment
from clinic_booking.infrastructure.store.documents import (
    appointment_from_document,
    doctor_from_document,
    treatment_from_document,
)


class MemoryClinicStore(AppointmentStorePort, ClinicDirectoryPort):
    """
    In-process store for local runs and tests.

    create_appointment re-checks overlap under a lock, so within a single
    process two bookings for the same doctor can never overlap.
    """

    def __init__(
        self,
        doctors: list[Doctor] | None = None,
        treatments: list[Treatment] | None = None,
        appointments: list[Appointment] | None = None,
    ) -> None:
        self._doctors: dict[str, Doctor] = {d.id: d for d in doctors or []}
        self._treatments: dict[str, Treatment] = {t.id: t for t in treatments or []}
        self._appointments: dict[str, Appointment] = {a.id: a for a in appointments or []}
        self._lock = asyncio.Lock()
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_seed_file(cls, path: str | Path) -> "MemoryClinicStore":
        with open(path, "r", encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)
        return cls(
            doctors=[doctor_from_document(doc) for doc in data.get("doctors", [])],
            treatments=[treatment_from_document(doc) for doc in data.get("treatments", [])],
            appointments=[appointment_from_document(doc) for doc in data.get("appointments", [])],
        )

    def add_doctor(self, doctor: Doctor) -> None:
        self._doctors[doctor.id] = doctor

    def add_treatment(self, treatment: Treatment) -> None:
        self._treatments[treatment.id] = treatment

    def add_appointment(self, appointment: Appointment) -> None:
        """Insert without any overlap check, the way other parts of the portal write."""
        self._appointments[appointment.id] = appointment

    def all_appointments(self) -> list[Appointment]:
        return list(self._appointments.values())

    async def get_doctor(self, doctor_id: str) -> Doctor | None:
        return self._doctors.get(doctor_id)

    async def get_treatment(self, treatment_id: str) -> Treatment | None:
        return self._treatments.get(treatment_id)

    async def get_appointments_in_range(
        self,
        doctor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> list[Appointment]:
        return [
            appt
            for appt in self._appointments.values()
            if appt.doctor_id == doctor_id and overlaps(appt.start, appt.end, range_start, range_end)
        ]

    async def create_appointment(self, data: NewAppointment) -> Appointment:
        async with self._lock:
            same_doctor = [a for a in self._appointments.values() if a.doctor_id == data.doctor_id]
            conflicts = find_conflicts(data.start, data.end, same_doctor)
            if conflicts:
                raise SlotConflict(
                    "This time slot has just been booked. Please select another one.",
                    conflicting_ids=[a.id for a in conflicts],
                )
            appointment = data.with_id(uuid4().hex)
            self._appointments[appointment.id] = appointment

        self._logger.info(
            "Memory store appointment created",
            extra={"appointment_id": appointment.id, "doctor_id": appointment.doctor_id},
        )
        return appointment
