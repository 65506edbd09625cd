#!/usr/bin/env python3
"""
Local booking harness (no HTTP, no document API).

Usage:
  python3 scripts/book_local.py DOCTOR_ID YYYY-MM-DD TREATMENT_ID [HH:MM PATIENT_ID]

Loads data/seed.json (or SEED_FILE) into the in-memory store, lists the free
slots for the doctor/date/treatment and, when a time and patient are given,
books that slot and lists again.
"""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import date, time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clinic_booking.application.exceptions import BookingError, SlotConflict
from clinic_booking.application.use_cases.booking import BookingCoordinator
from clinic_booking.infrastructure.store.memory_store import MemoryClinicStore


def _print_listing(listing) -> None:
    if not listing.slots:
        print(f"  no slots ({listing.reason})")
        return
    print("  " + " ".join(slot.strftime("%H:%M") for slot in listing.slots))


async def main(argv: list[str]) -> int:
    if len(argv) not in (3, 5):
        print(__doc__)
        return 2

    doctor_id, on_date, treatment_id = argv[0], date.fromisoformat(argv[1]), argv[2]
    seed = os.getenv("SEED_FILE") or str(ROOT / "data" / "seed.json")
    store = MemoryClinicStore.from_seed_file(seed)
    coordinator = BookingCoordinator(store, store)

    try:
        print(f"Free slots for {doctor_id} on {on_date.isoformat()}:")
        _print_listing(await coordinator.list_available_slots(doctor_id, on_date, treatment_id))

        if len(argv) == 5:
            appointment = await coordinator.book_slot(
                doctor_id, on_date, time.fromisoformat(argv[3]), treatment_id, argv[4]
            )
            print(f"Booked {appointment.id}: {appointment.start:%H:%M}-{appointment.end:%H:%M}")
            print("Free slots after booking:")
            _print_listing(await coordinator.list_available_slots(doctor_id, on_date, treatment_id))
    except SlotConflict as e:
        print(f"Conflict: {e}")
        return 1
    except BookingError as e:
        print(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
