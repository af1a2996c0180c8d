from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from clinicbook.schemas.common import Envelope

# Properties to receive on booking
class AppointmentCreate(BaseModel):
    doc_id: int
    slot_date: str = Field(..., min_length=1)
    slot_time: str = Field(..., min_length=1)

# Properties to return to client
class Appointment(BaseModel):
    id: int
    user_id: int
    doc_id: int
    user_data: dict
    doc_data: dict
    slot_date: str
    slot_time: str
    amount: float
    cancelled: bool
    payment: bool
    is_completed: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AppointmentResponse(Envelope):
    appointment: Appointment

class AppointmentListResponse(Envelope):
    appointments: List[Appointment]
