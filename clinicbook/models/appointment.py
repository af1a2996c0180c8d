from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from clinicbook.db.base import Base
from datetime import datetime

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doc_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)

    # Snapshots of the patient and doctor as they were when the slot was booked
    user_data = Column(JSON, nullable=False)
    doc_data = Column(JSON, nullable=False)

    slot_date = Column(String, nullable=False)
    slot_time = Column(String, nullable=False)
    amount = Column(Float, nullable=False)

    cancelled = Column(Boolean, nullable=False, default=False)
    payment = Column(Boolean, nullable=False, default=False)
    is_completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")
