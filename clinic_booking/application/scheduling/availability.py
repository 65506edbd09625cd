"""
Overlap detection between candidate slots and existing appointments.

Intervals are half-open, [start, end): a slot ending exactly when an
appointment starts (or starting exactly when one ends) is free.
Cancelled appointments never block time.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, datetime, time, timedelta

from clinic_booking.domain.entities.appointment import Appointment


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and end_a > start_b


def day_bounds(on_date: date) -> tuple[datetime, datetime]:
    """[00:00 of on_date, 00:00 of the next day)"""
    day_start = datetime.combine(on_date, time.min)
    return day_start, day_start + timedelta(days=1)


def blocking_appointments(
    appointments: Iterable[Appointment],
    doctor_id: str,
    on_date: date,
) -> list[Appointment]:
    """
    Keep only the doctor's appointments that can block a slot on on_date.

    Args:
        appointments: appointments as returned by the store
        doctor_id: the doctor being scheduled
        on_date: the calendar date being scheduled

    Returns:
        list[Appointment]: non-cancelled appointments of doctor_id that
        touch on_date, in start order
    """
    day_start, day_end = day_bounds(on_date)
    blocking = [
        appt
        for appt in appointments
        if appt.doctor_id == doctor_id
        and appt.occupies_time
        and overlaps(appt.start, appt.end, day_start, day_end)
    ]
    return sorted(blocking, key=lambda appt: appt.start)


def find_conflicts(
    start: datetime,
    end: datetime,
    appointments: Iterable[Appointment],
) -> list[Appointment]:
    return [
        appt
        for appt in appointments
        if appt.occupies_time and overlaps(start, end, appt.start, appt.end)
    ]


def filter_available(
    candidates: Iterable[datetime],
    duration: int,
    appointments: Iterable[Appointment],
) -> Iterator[datetime]:
    """Yield the candidates whose [start, start + duration) is free of every blocking appointment."""
    length = timedelta(minutes=duration)
    blocking = [appt for appt in appointments if appt.occupies_time]
    for candidate in candidates:
        if not find_conflicts(candidate, candidate + length, blocking):
            yield candidate
