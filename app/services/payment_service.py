import asyncio
import requests

from app.core.config import settings
from app.core.errors import NotFound, PaymentError
from app.core.logger import logger
from app.services.db_service import BOOKINGS, PAYMENTS, RecordStore


def to_minor_units(price: float) -> int:
    """Stripe takes amounts in cents."""
    return int(round(price * 100))


async def create_payment_intent(price: float) -> str:
    """
    Creates a card PaymentIntent at Stripe and returns its client secret.
    The browser confirms the payment with that secret; nothing is charged here.
    """
    if not settings.STRIPE_SECRET_KEY:
        logger.error("❌ STRIPE_SECRET_KEY is missing in .env.")
        raise PaymentError("Payment processor not configured")

    amount = to_minor_units(price)

    def _create():
        url = f"{settings.STRIPE_API_URL}/payment_intents"
        payload = {
            "amount": amount,
            "currency": settings.PAYMENT_CURRENCY,
            "payment_method_types[]": "card",
        }
        logger.info(f"💳 Creating payment intent for {amount} {settings.PAYMENT_CURRENCY}")
        try:
            response = requests.post(
                url,
                data=payload,
                auth=(settings.STRIPE_SECRET_KEY, ""),
                timeout=settings.PAYMENT_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.error(f"❌ Exception calling Stripe: {e}")
            raise PaymentError() from e

        if response.status_code != 200:
            logger.error(f"❌ Stripe Error {response.status_code}: {response.text}")
            raise PaymentError()

        return response.json()["client_secret"]

    return await asyncio.to_thread(_create)


async def record_payment(store: RecordStore, payment: dict) -> dict:
    """
    Stores a completed payment and marks the referenced booking as paid.
    Returns: {"payment": dict, "booking": dict}
    """
    booking_id = payment["booking"]
    booking = await store.find_one(BOOKINGS, {"id": booking_id})
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")

    # Booking first: a failed update must not leave an orphan payment row
    updated = await store.update(
        BOOKINGS,
        {"id": booking_id},
        {"paid": True, "transactionId": payment["transactionId"]},
    )
    stored = await store.insert_one(PAYMENTS, payment)
    logger.info(f"✅ Payment {payment['transactionId']} recorded for booking {booking_id}")

    return {"payment": stored, "booking": updated[0] if updated else booking}
