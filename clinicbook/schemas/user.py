from typing import Optional
from pydantic import BaseModel
from datetime import datetime

from clinicbook.schemas.common import Envelope

class Address(BaseModel):
    line1: str = ""
    line2: str = ""

class UserCreate(BaseModel):
    # Presence is checked in the handler so a missing field reads "Missing Details"
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class UserLogin(BaseModel):
    email: str
    password: str

class UserUpdate(BaseModel):
    name: str
    phone: str
    dob: str
    gender: str
    address: Optional[Address] = None
    image: Optional[str] = None

class User(BaseModel):
    id: int
    name: str
    email: str
    image: Optional[str] = None
    phone: str
    address: Address
    gender: str
    dob: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Token(Envelope):
    token: str

class ProfileResponse(Envelope):
    user_data: User

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    is_admin: Optional[bool] = False
