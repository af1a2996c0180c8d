from typing import Any, Dict
from pydantic import BaseModel

from clinicbook.schemas.common import Envelope

class PaymentRequest(BaseModel):
    appointment_id: int

class RazorpayVerifyRequest(BaseModel):
    razorpay_order_id: str

class StripeVerifyRequest(BaseModel):
    appointment_id: int
    session_id: str

class RazorpayOrderResponse(Envelope):
    order: Dict[str, Any]

class StripeSessionResponse(Envelope):
    session_url: str
