from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from clinic_booking.core.config import settings
from clinic_booking.application.use_cases.booking import BookingCoordinator
from clinic_booking.infrastructure.store.document_api_store import DocumentApiStore
from clinic_booking.infrastructure.store.memory_store import MemoryClinicStore


@lru_cache
def get_clinic_store() -> MemoryClinicStore | DocumentApiStore:
    logger = logging.getLogger(__name__)
    logger.info("STORE_PROVIDER=%s ENV=%s", settings.STORE_PROVIDER, settings.ENV)

    if settings.STORE_PROVIDER.lower() == "document_api":
        if not settings.DOCUMENT_API_URL:
            raise ValueError("DOCUMENT_API_URL is required when STORE_PROVIDER=document_api")
        logger.info("Using DocumentApiStore")
        return DocumentApiStore()

    if settings.SEED_FILE:
        logger.info("Using MemoryClinicStore seeded from %s", settings.SEED_FILE)
        return MemoryClinicStore.from_seed_file(settings.SEED_FILE)
    logger.info("Using empty MemoryClinicStore")
    return MemoryClinicStore()


def get_booking_coordinator() -> BookingCoordinator:
    store = get_clinic_store()
    return BookingCoordinator(
        store=store,
        directory=store,
        timezone=ZoneInfo(settings.HOSPITAL_TIMEZONE),
        booking_horizon_months=settings.BOOKING_HORIZON_MONTHS,
    )


async def close_clinic_store() -> None:
    if get_clinic_store.cache_info().currsize == 0:
        return
    store = get_clinic_store()
    if isinstance(store, DocumentApiStore):
        await store.aclose()
    get_clinic_store.cache_clear()
