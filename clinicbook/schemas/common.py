from typing import Optional
from pydantic import BaseModel

# Every response body carries a success flag and, where there is no payload, a message
class Envelope(BaseModel):
    success: bool = True
    message: Optional[str] = None

class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
