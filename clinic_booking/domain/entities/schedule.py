from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from enum import Enum


class Weekday(str, Enum):
    SUN = "Sun"
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"

    @classmethod
    def for_date(cls, on_date: date) -> "Weekday":
        # isoweekday(): Monday=1 ... Sunday=7, so % 7 puts Sunday at index 0
        return WEEKDAYS[on_date.isoweekday() % 7]


WEEKDAYS: tuple[Weekday, ...] = (
    Weekday.SUN,
    Weekday.MON,
    Weekday.TUE,
    Weekday.WED,
    Weekday.THU,
    Weekday.FRI,
    Weekday.SAT,
)


@dataclass(frozen=True)
class WorkingHour:
    start: time
    end: time

    @classmethod
    def parse(cls, start: str, end: str) -> "WorkingHour":
        """Build from "HH:MM" strings as stored on doctor profiles."""
        return cls(start=time.fromisoformat(start), end=time.fromisoformat(end))


WeeklySchedule = dict[Weekday, WorkingHour]
