from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from clinicbook.db.base import Base

DEFAULT_ADDRESS = {"line1": "", "line2": ""}

class User(Base):
    """A patient account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    image = Column(String, nullable=True)
    phone = Column(String, nullable=False, default="0000000000")
    address = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_ADDRESS))
    gender = Column(String, nullable=False, default="Not Selected")
    dob = Column(String, nullable=False, default="Not Selected")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    appointments = relationship("Appointment", back_populates="user")
    reports = relationship(
        "Report",
        back_populates="user",
        order_by="Report.id",
        cascade="all, delete-orphan",
    )

    def snapshot(self) -> dict:
        """Public copy of the record, denormalized into appointments at booking time"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "image": self.image,
            "phone": self.phone,
            "address": self.address,
            "gender": self.gender,
            "dob": self.dob,
        }
