import uuid
from typing import List, Optional
from pydantic import BaseModel, Field

# Records are stored with the same field names the web client sends
# (camelCase), so request models pass straight through to the store.
# Emails are compared verbatim, so they are not normalized here.

class BookingIn(BaseModel):
    treatment: str
    date: str
    slot: str
    patient: Optional[str] = None
    patientEmail: str
    phone: Optional[str] = None
    price: Optional[float] = None

class UserIn(BaseModel):
    """Profile fields a user may set on themselves. Unknown fields (`role` included) are ignored."""
    email: Optional[str] = None
    name: Optional[str] = None

class UserCreate(UserIn):
    email: str

class DoctorIn(BaseModel):
    name: str
    email: Optional[str] = None
    specialty: str
    slots: List[str] = Field(default_factory=list)
    img: Optional[str] = None

class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0)

class PaymentIn(BaseModel):
    booking: uuid.UUID = Field(..., description="Id of the booking being paid")
    transactionId: str
    amount: Optional[float] = None
    patientEmail: Optional[str] = None
