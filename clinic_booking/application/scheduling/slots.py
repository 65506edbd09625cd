"""
Candidate slot generation.

Slices a working window into fixed-interval start instants sized to a
treatment's duration. Availability is not considered here, see
availability.py.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta

from clinic_booking.application.exceptions import ConfigurationError
from clinic_booking.domain.entities.schedule import WorkingHour


def validate_slot_settings(slot_interval: int, duration: int) -> None:
    if slot_interval <= 0:
        raise ConfigurationError(f"slot_interval must be positive, got {slot_interval}")
    if duration <= 0:
        raise ConfigurationError(f"treatment duration must be positive, got {duration}")


class SlotGenerator:
    """
    Lazy, restartable sequence of candidate start instants.

    The first candidate is window_start; each next one is slot_interval
    minutes later. A candidate is yielded only while candidate + duration
    still fits inside the window (ending exactly at window_end is allowed).
    Every call to iter() starts again from window_start.
    """

    def __init__(
        self,
        window_start: datetime,
        window_end: datetime,
        slot_interval: int,
        duration: int,
    ) -> None:
        validate_slot_settings(slot_interval, duration)
        self.window_start = window_start
        self.window_end = window_end
        self.slot_interval = slot_interval
        self.duration = duration

    def __iter__(self) -> Iterator[datetime]:
        step = timedelta(minutes=self.slot_interval)
        length = timedelta(minutes=self.duration)
        current = self.window_start
        while current + length <= self.window_end:
            yield current
            current += step

    def contains(self, start: datetime) -> bool:
        """True if start fits inside the window, whether or not it sits on the slot grid."""
        return self.window_start <= start and start + timedelta(minutes=self.duration) <= self.window_end


def slots_for_window(
    on_date: date,
    window: WorkingHour,
    slot_interval: int,
    duration: int,
) -> SlotGenerator:
    return SlotGenerator(
        window_start=datetime.combine(on_date, window.start),
        window_end=datetime.combine(on_date, window.end),
        slot_interval=slot_interval,
        duration=duration,
    )
