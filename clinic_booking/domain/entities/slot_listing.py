from __future__ import annotations

from dataclasses import dataclass
from datetime import time

NO_WORKING_HOURS = "no-working-hours"
NO_VALID_SLOTS = "no-valid-slots"


@dataclass(frozen=True)
class SlotListing:
    slots: tuple[time, ...] = ()
    reason: str | None = None  # None, "no-working-hours", "no-valid-slots"

    @classmethod
    def closed(cls) -> "SlotListing":
        return cls(slots=(), reason=NO_WORKING_HOURS)

    @classmethod
    def of(cls, slots: list[time]) -> "SlotListing":
        if not slots:
            return cls(slots=(), reason=NO_VALID_SLOTS)
        return cls(slots=tuple(slots))
