import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.core.errors import NotFound
from app.core.security import ensure_self_access, verify_jwt
from app.models.db_models import BookingIn
from app.services import booking_service
from app.services.db_service import RecordStore, get_store

router = APIRouter()

@router.post("/booking")
async def create_booking(req: BookingIn, store: RecordStore = Depends(get_store)):
    return await booking_service.create_booking(store, req.model_dump(exclude_none=True))

@router.get("/booking/{booking_id}")
async def get_booking(
    booking_id: uuid.UUID,
    email: str = Depends(verify_jwt),
    store: RecordStore = Depends(get_store),
):
    booking = await booking_service.get_booking(store, str(booking_id))
    # Someone else's booking looks the same as a missing one
    if not booking or booking.get("patientEmail") != email:
        raise NotFound(f"Booking {booking_id} not found")
    return booking

@router.get("/bookings")
async def list_bookings(
    email: Optional[str] = None,
    principal: str = Depends(verify_jwt),
    store: RecordStore = Depends(get_store),
) -> List[dict]:
    ensure_self_access(email, principal)
    return await booking_service.bookings_for_patient(store, email)
