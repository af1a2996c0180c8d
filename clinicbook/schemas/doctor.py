from typing import Optional, Dict, List
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

from clinicbook.schemas.common import Envelope
from clinicbook.schemas.user import Address

# Doctor Schemas
class DoctorBase(BaseModel):
    name: str
    speciality: str
    degree: str
    experience: str
    about: str = ""
    fees: float = Field(..., ge=0)
    address: Address = Address()

class DoctorCreate(DoctorBase):
    email: EmailStr
    password: str = Field(..., min_length=8)

class DoctorPublic(DoctorBase):
    id: int
    image: Optional[str] = None
    available: bool
    slots_booked: Dict[str, List[str]] = {}

    class Config:
        from_attributes = True

class Doctor(DoctorPublic):
    email: str
    created_at: Optional[datetime] = None

class DoctorListResponse(Envelope):
    doctors: List[DoctorPublic]

class AdminDoctorListResponse(Envelope):
    doctors: List[Doctor]
