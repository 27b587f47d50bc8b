from typing import List, Optional

from app.core.errors import BookingRejected, DuplicateRecordError
from app.core.logger import logger
from app.services.db_service import BOOKINGS, SERVICES, RecordStore


async def create_booking(store: RecordStore, booking: dict) -> dict:
    """
    Books a slot unless the patient already has a booking for this treatment on that date.

    The (treatment, date, patientEmail) unique constraint in the store decides;
    a conflict returns the existing booking with success=False.
    Returns: {"success": bool, "booking": dict}
    """
    # Bookings reference services by name, so a renamed service orphans old bookings
    service = await store.find_one(SERVICES, {"name": booking["treatment"]})
    if not service:
        raise BookingRejected(f"Unknown treatment: {booking['treatment']}")
    if booking["slot"] not in service.get("slots", []):
        raise BookingRejected(f"Slot '{booking['slot']}' is not offered for {booking['treatment']}")

    logger.info(f"📥 Booking Request - {booking['treatment']} on {booking['date']} at {booking['slot']}")

    try:
        created = await store.insert_one(BOOKINGS, booking)
    except DuplicateRecordError:
        existing = await store.find_one(BOOKINGS, {
            "treatment": booking["treatment"],
            "date": booking["date"],
            "patientEmail": booking["patientEmail"],
        })
        logger.info(f"🔁 Booking already exists for {booking['patientEmail']} (ID {existing and existing.get('id')})")
        return {"success": False, "booking": existing}

    logger.info(f"✅ Booking {created.get('id')} created for {booking['patientEmail']}")
    return {"success": True, "booking": created}


async def bookings_for_patient(store: RecordStore, email: str) -> List[dict]:
    return await store.find(BOOKINGS, {"patientEmail": email})


async def get_booking(store: RecordStore, booking_id: str) -> Optional[dict]:
    return await store.find_one(BOOKINGS, {"id": booking_id})
