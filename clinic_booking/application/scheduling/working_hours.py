from __future__ import annotations

from datetime import date

from clinic_booking.domain.entities.doctor import Doctor
from clinic_booking.domain.entities.schedule import Weekday, WorkingHour


def resolve_working_hours(doctor: Doctor, on_date: date) -> WorkingHour | None:
    """
    Resolve the doctor's working window for a calendar date.
    Returns None when the doctor does not see patients that day.
    """
    if not doctor.is_active:
        return None

    weekday = Weekday.for_date(on_date)
    if weekday not in doctor.working_days:
        return None

    working_hour = doctor.working_hours.get(weekday)
    if working_hour is None or working_hour.end <= working_hour.start:
        return None
    return working_hour
