import datetime as dt

from pydantic import BaseModel, Field

from clinic_booking.domain.entities.appointment import Appointment, AppointmentStatus, ConsultationType
from clinic_booking.domain.entities.slot_listing import SlotListing

NOON = dt.time(12, 0)


class SlotListingSchema(BaseModel):
    slots: list[str] = Field(default_factory=list)
    reason: str | None = None
    morning: list[str] = Field(default_factory=list)
    afternoon: list[str] = Field(default_factory=list)

    @classmethod
    def from_listing(cls, listing: SlotListing) -> "SlotListingSchema":
        labels = [slot.strftime("%H:%M") for slot in listing.slots]
        return cls(
            slots=labels,
            reason=listing.reason,
            morning=[slot.strftime("%H:%M") for slot in listing.slots if slot < NOON],
            afternoon=[slot.strftime("%H:%M") for slot in listing.slots if slot >= NOON],
        )


class BookSlotRequestSchema(BaseModel):
    doctor_id: str = Field(min_length=1)
    date: dt.date
    slot_start: dt.time
    treatment_id: str = Field(min_length=1)
    patient_id: str = Field(min_length=1)
    consultation_type: ConsultationType = ConsultationType.DIRECT
    location_id: str | None = None


class AppointmentSchema(BaseModel):
    id: str
    doctor_id: str
    patient_id: str
    start: dt.datetime
    end: dt.datetime
    status: AppointmentStatus
    consultation_type: ConsultationType
    treatment_name: str | None = None
    location_id: str | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            id=appointment.id,
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            start=appointment.start,
            end=appointment.end,
            status=appointment.status,
            consultation_type=appointment.consultation_type,
            treatment_name=appointment.treatment_name,
            location_id=appointment.location_id,
        )


class ConflictSchema(BaseModel):
    detail: str
    conflicting_ids: list[str] = Field(default_factory=list)
