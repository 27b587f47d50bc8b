from typing import List, Optional

from app.services.db_service import BOOKINGS, SERVICES, RecordStore


def compute_availability(services: List[dict], bookings: List[dict]) -> List[dict]:
    """
    Removes booked slots from each service.

    `bookings` must already be restricted to a single date. A booking counts
    against a service when its `treatment` equals the service `name` exactly.
    Services keep their order and are never dropped; a fully booked service
    comes back with an empty `slots` list. Inputs are not mutated.
    """
    available = []
    for service in services:
        booked_slots = {
            booking.get("slot")
            for booking in bookings
            if booking.get("treatment") == service["name"]
        }
        view = dict(service)
        view["slots"] = [slot for slot in service["slots"] if slot not in booked_slots]
        available.append(view)
    return available


async def available_services(store: RecordStore, date: Optional[str]) -> List[dict]:
    services = await store.find(SERVICES)

    # No date means no dated booking can match
    bookings = await store.find(BOOKINGS, {"date": date}) if date is not None else []

    return compute_availability(services, bookings)
