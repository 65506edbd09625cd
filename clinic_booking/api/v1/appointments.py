import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from clinic_booking.api.v1.schemas import (
    AppointmentSchema,
    BookSlotRequestSchema,
    ConflictSchema,
    SlotListingSchema,
)
from clinic_booking.application.exceptions import (
    BookingValidationError,
    ConfigurationError,
    NotFoundError,
    SlotConflict,
    StoreRequestError,
    StoreUnavailableError,
)
from clinic_booking.application.use_cases.booking import BookingCoordinator
from clinic_booking.wiring.dependencies import get_booking_coordinator

router = APIRouter()


@router.get("/doctors/{doctor_id}/slots", response_model=SlotListingSchema)
async def list_available_slots(
    doctor_id: str,
    date: dt.date = Query(...),
    treatment_id: str = Query(..., min_length=1),
    coordinator: BookingCoordinator = Depends(get_booking_coordinator),
):
    try:
        listing = await coordinator.list_available_slots(doctor_id, date, treatment_id)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except StoreRequestError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=f"Scheduling configuration error: {e}")

    return SlotListingSchema.from_listing(listing)


@router.post(
    "/appointments",
    response_model=AppointmentSchema,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ConflictSchema}},
)
async def book_slot(
    req: BookSlotRequestSchema,
    coordinator: BookingCoordinator = Depends(get_booking_coordinator),
):
    try:
        appointment = await coordinator.book_slot(
            doctor_id=req.doctor_id,
            on_date=req.date,
            slot_start=req.slot_start,
            treatment_id=req.treatment_id,
            patient_id=req.patient_id,
            consultation_type=req.consultation_type,
            location_id=req.location_id,
        )
    except SlotConflict as e:
        # The client must list slots again and let the user reselect.
        return JSONResponse(
            status_code=409,
            content=ConflictSchema(detail=str(e), conflicting_ids=e.conflicting_ids).model_dump(),
        )
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except StoreRequestError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=f"Scheduling configuration error: {e}")

    return AppointmentSchema.from_entity(appointment)
