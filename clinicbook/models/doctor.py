from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Float, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from clinicbook.db.base import Base

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    image = Column(String, nullable=True)
    speciality = Column(String, nullable=False)  # e.g., "General physician", "Dermatologist"
    degree = Column(String, nullable=False)
    experience = Column(String, nullable=False)  # free text, e.g. "4 Years"
    about = Column(Text, nullable=False, default="")
    available = Column(Boolean, nullable=False, default=True)
    fees = Column(Float, nullable=False)
    address = Column(JSON, nullable=False, default=lambda: {"line1": "", "line2": ""})
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    booked_slots = relationship(
        "BookedSlot",
        back_populates="doctor",
        order_by="BookedSlot.id",
        cascade="all, delete-orphan",
    )
    appointments = relationship("Appointment", back_populates="doctor")

    @property
    def slots_booked(self) -> dict:
        """The slot ledger as date -> booked times, in booking order"""
        ledger: dict = {}
        for slot in self.booked_slots:
            ledger.setdefault(slot.slot_date, []).append(slot.slot_time)
        return ledger

    def snapshot(self) -> dict:
        """Public copy of the record, denormalized into appointments at booking time"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "image": self.image,
            "speciality": self.speciality,
            "degree": self.degree,
            "experience": self.experience,
            "about": self.about,
            "available": self.available,
            "fees": self.fees,
            "address": self.address,
        }

class BookedSlot(Base):
    """One entry of a doctor's slot ledger.

    The unique constraint is what keeps two concurrent bookings from
    claiming the same doctor/date/time.
    """

    __tablename__ = "booked_slots"
    __table_args__ = (
        UniqueConstraint("doctor_id", "slot_date", "slot_time", name="uq_booked_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    slot_date = Column(String, nullable=False)
    slot_time = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    doctor = relationship("Doctor", back_populates="booked_slots")
