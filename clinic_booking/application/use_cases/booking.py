from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from clinic_booking.application.exceptions import (
    BookingValidationError,
    ConfigurationError,
    DoctorNotFound,
    SlotConflict,
    SlotOutsideWorkingHours,
    TreatmentNotFound,
    TreatmentNotOffered,
)
from clinic_booking.application.ports.appointment_store import AppointmentStorePort
from clinic_booking.application.ports.clinic_directory import ClinicDirectoryPort
from clinic_booking.application.scheduling.availability import (
    blocking_appointments,
    day_bounds,
    filter_available,
    find_conflicts,
)
from clinic_booking.application.scheduling.slots import slots_for_window, validate_slot_settings
from clinic_booking.application.scheduling.working_hours import resolve_working_hours
from clinic_booking.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    ConsultationType,
    NewAppointment,
)
from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.slot_listing import SlotListing
from clinic_booking.domain.entities.treatment import Treatment


class BookingCoordinator:
    """
    Lists free slots for a doctor/date/treatment and books one of them.

    Listing and booking are two independent round trips to a store without
    transactions. Booking therefore re-fetches the doctor's appointments and
    re-runs the overlap test right before the insert. This narrows the race
    between "slot shown as free" and "slot confirmed" but cannot close it;
    only a store that rejects overlapping inserts itself can.
    """

    def __init__(
        self,
        store: AppointmentStorePort,
        directory: ClinicDirectoryPort,
        timezone: ZoneInfo | None = None,
        booking_horizon_months: int | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._timezone = timezone or ZoneInfo("UTC")
        self._booking_horizon_months = booking_horizon_months or None
        self._today = today or (lambda: datetime.now(self._timezone).date())
        self._logger = logging.getLogger(__name__)

    async def list_available_slots(
        self,
        doctor_id: str,
        on_date: date | None,
        treatment_id: str,
    ) -> SlotListing:
        self._validate_selection(doctor_id=doctor_id, on_date=on_date, treatment_id=treatment_id)

        doctor, treatment = await self._load_reference_data(doctor_id, treatment_id)
        window = resolve_working_hours(doctor, on_date)
        if window is None:
            self._logger.info(
                "No working hours",
                extra={"doctor_id": doctor_id, "date": on_date.isoformat(), "reason": "no-working-hours"},
            )
            return SlotListing.closed()

        candidates = slots_for_window(on_date, window, doctor.slot_interval, treatment.duration)
        appointments = await self._fetch_blocking(doctor_id, on_date)
        free = [slot.time() for slot in filter_available(candidates, treatment.duration, appointments)]

        listing = SlotListing.of(free)
        self._logger.info(
            "Slots listed",
            extra={
                "doctor_id": doctor_id,
                "date": on_date.isoformat(),
                "treatment_id": treatment_id,
                "slot_count": len(listing.slots),
                "reason": listing.reason,
            },
        )
        return listing

    async def book_slot(
        self,
        doctor_id: str,
        on_date: date | None,
        slot_start: time | datetime | None,
        treatment_id: str,
        patient_id: str,
        consultation_type: ConsultationType | str = ConsultationType.DIRECT,
        location_id: str | None = None,
    ) -> Appointment:
        self._validate_selection(
            doctor_id=doctor_id,
            on_date=on_date,
            treatment_id=treatment_id,
            slot_start=slot_start,
            patient_id=patient_id,
        )
        consultation = _parse_consultation_type(consultation_type)
        start = _combine_slot(on_date, slot_start)

        doctor, treatment = await self._load_reference_data(doctor_id, treatment_id)
        end = start + timedelta(minutes=treatment.duration)

        window = resolve_working_hours(doctor, on_date)
        if window is None:
            raise SlotOutsideWorkingHours(f"Doctor {doctor_id} does not work on {on_date.isoformat()}")
        if not slots_for_window(on_date, window, doctor.slot_interval, treatment.duration).contains(start):
            raise SlotOutsideWorkingHours(
                f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')} is outside working hours "
                f"{window.start.strftime('%H:%M')}-{window.end.strftime('%H:%M')}"
            )

        # Never reuse a listing here: the store may have changed since.
        appointments = await self._fetch_blocking(doctor_id, on_date)
        conflicts = find_conflicts(start, end, appointments)
        if conflicts:
            conflicting_ids = [appt.id for appt in conflicts]
            self._logger.warning(
                "Slot conflict",
                extra={
                    "doctor_id": doctor_id,
                    "date": on_date.isoformat(),
                    "reason": "slot-taken",
                    "conflicting_ids": conflicting_ids,
                },
            )
            raise SlotConflict(
                "This time slot has just been booked. Please select another one.",
                conflicting_ids=conflicting_ids,
            )

        appointment = await self._store.create_appointment(
            NewAppointment(
                doctor_id=doctor_id,
                patient_id=patient_id,
                start=start,
                end=end,
                status=AppointmentStatus.REGISTERED,
                consultation_type=consultation,
                treatment_name=treatment.name,
                location_id=location_id,
            )
        )
        self._logger.info(
            "Appointment booked",
            extra={
                "appointment_id": appointment.id,
                "doctor_id": doctor_id,
                "date": on_date.isoformat(),
                "treatment_id": treatment_id,
            },
        )
        return appointment

    def _validate_selection(self, on_date: date | None, **required: object) -> None:
        if on_date is None:
            raise BookingValidationError("Please select a date")
        missing = [name for name, value in required.items() if value is None or value == ""]
        if missing:
            raise BookingValidationError(f"Missing required selection: {', '.join(missing)}")

        if self._booking_horizon_months:
            today = self._today()
            if on_date < today:
                raise BookingValidationError(f"Cannot book a date in the past: {on_date.isoformat()}")
            limit = add_months(today, self._booking_horizon_months)
            if on_date > limit:
                raise BookingValidationError(
                    f"Appointments can only be booked up to {limit.isoformat()}"
                )

    async def _load_reference_data(self, doctor_id: str, treatment_id: str) -> tuple[Doctor, Treatment]:
        doctor = await self._directory.get_doctor(doctor_id)
        if doctor is None:
            raise DoctorNotFound(f"Doctor not found: {doctor_id}")
        treatment = await self._directory.get_treatment(treatment_id)
        if treatment is None:
            raise TreatmentNotFound(f"Treatment not found: {treatment_id}")
        if not doctor.offers(treatment_id):
            raise TreatmentNotOffered(f"Doctor {doctor_id} does not offer treatment {treatment_id}")

        try:
            validate_slot_settings(doctor.slot_interval, treatment.duration)
        except ConfigurationError as e:
            self._logger.error(
                "Invalid scheduling configuration",
                extra={"doctor_id": doctor_id, "treatment_id": treatment_id, "error": str(e)},
            )
            raise
        return doctor, treatment

    async def _fetch_blocking(self, doctor_id: str, on_date: date) -> list[Appointment]:
        day_start, day_end = day_bounds(on_date)
        appointments = await self._store.get_appointments_in_range(doctor_id, day_start, day_end)
        return blocking_appointments(appointments, doctor_id, on_date)


def _parse_consultation_type(value: ConsultationType | str) -> ConsultationType:
    try:
        return ConsultationType(value)
    except ValueError:
        raise BookingValidationError(f"Unknown consultation type: {value}") from None


def _combine_slot(on_date: date, slot_start: time | datetime) -> datetime:
    if isinstance(slot_start, datetime):
        if slot_start.date() != on_date:
            raise BookingValidationError("Selected slot does not fall on the selected date")
        return slot_start.replace(tzinfo=None)
    return datetime.combine(on_date, slot_start)


def add_months(on_date: date, months: int) -> date:
    """Same day of the month, `months` later; clamped to the last day of a shorter month."""
    month_index = on_date.month - 1 + months
    year, month = on_date.year + month_index // 12, month_index % 12 + 1
    day = min(on_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
