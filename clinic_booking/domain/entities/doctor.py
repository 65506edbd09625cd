from __future__ import annotations

from dataclasses import dataclass, field

from clinic_booking.domain.entities.schedule import WeeklySchedule, Weekday


@dataclass(frozen=True)
class Doctor:
    id: str
    name: str
    working_days: frozenset[Weekday] = frozenset()
    working_hours: WeeklySchedule = field(default_factory=dict)
    slot_interval: int = 30  # minutes
    assigned_treatments: frozenset[str] = frozenset()
    assigned_locations: frozenset[str] = frozenset()
    status: str = "active"  # "active", "inactive"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def offers(self, treatment_id: str) -> bool:
        return treatment_id in self.assigned_treatments
