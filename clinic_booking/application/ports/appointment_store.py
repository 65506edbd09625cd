from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from clinic_booking.domain.entities.appointment import Appointment, NewAppointment


class AppointmentStorePort(ABC):
    @abstractmethod
    async def get_appointments_in_range(
        self,
        doctor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> list[Appointment]:
        """
        Return the doctor's appointments overlapping [range_start, range_end).
        Must reflect the store at call time; cancelled appointments may be included.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_appointment(self, data: NewAppointment) -> Appointment:
        """Insert a single appointment. Raises StoreUnavailableError if the store is down."""
        raise NotImplementedError
