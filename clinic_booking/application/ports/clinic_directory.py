from __future__ import annotations

from abc import ABC, abstractmethod

from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.treatment import Treatment


class ClinicDirectoryPort(ABC):
    @abstractmethod
    async def get_doctor(self, doctor_id: str) -> Doctor | None:
        """Get doctor by id. Returns None if not found."""
        raise NotImplementedError

    @abstractmethod
    async def get_treatment(self, treatment_id: str) -> Treatment | None:
        """Get treatment by id. Returns None if not found."""
        raise NotImplementedError
