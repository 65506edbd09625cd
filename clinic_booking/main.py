import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clinic_booking.api.v1.appointments import router as appointments_router
from clinic_booking.core.config import settings
from clinic_booking.wiring.dependencies import close_clinic_store

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("doctor_id", "date", "treatment_id", "appointment_id", "slot_count", "conflicting_ids", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_clinic_store()


app = FastAPI(title="Clinic Appointment Booking", version="1.0.0", lifespan=lifespan)

app.include_router(appointments_router, prefix="/api/v1", tags=["appointments"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
