from fastapi import APIRouter, Depends

from app.models.db_models import PaymentIn, PaymentIntentRequest
from app.services import payment_service
from app.services.db_service import RecordStore, get_store

router = APIRouter()

@router.post("/create-payment-intent")
async def create_payment_intent(req: PaymentIntentRequest):
    client_secret = await payment_service.create_payment_intent(req.price)
    return {"clientSecret": client_secret}

@router.post("/payments")
async def record_payment(req: PaymentIn, store: RecordStore = Depends(get_store)):
    return await payment_service.record_payment(store, req.model_dump(mode="json", exclude_none=True))
