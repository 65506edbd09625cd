from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    REGISTERED = "Registered"
    ENCOUNTER = "Encounter"
    FINISHED = "Finished"
    CANCELLED = "Cancelled"
    WAITING_PAYMENT = "Waiting Payment"
    NO_SHOW = "No Show"


class ConsultationType(str, Enum):
    DIRECT = "direct"
    ONLINE = "online"


@dataclass(frozen=True)
class Appointment:
    id: str
    doctor_id: str
    patient_id: str
    start: datetime
    end: datetime
    status: AppointmentStatus = AppointmentStatus.REGISTERED
    consultation_type: ConsultationType = ConsultationType.DIRECT
    treatment_name: str | None = None
    location_id: str | None = None

    @property
    def occupies_time(self) -> bool:
        """Every status except Cancelled keeps the doctor's time taken."""
        return self.status != AppointmentStatus.CANCELLED


@dataclass(frozen=True)
class NewAppointment:
    doctor_id: str
    patient_id: str
    start: datetime
    end: datetime
    status: AppointmentStatus = AppointmentStatus.REGISTERED
    consultation_type: ConsultationType = ConsultationType.DIRECT
    treatment_name: str | None = None
    location_id: str | None = None

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("Appointment start must be before its end")

    def with_id(self, appointment_id: str) -> Appointment:
        return Appointment(
            id=appointment_id,
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
            start=self.start,
            end=self.end,
            status=self.status,
            consultation_type=self.consultation_type,
            treatment_name=self.treatment_name,
            location_id=self.location_id,
        )
