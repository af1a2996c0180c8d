"""
Per-doctor slot ledger.

Each booked (doctor, date, time) triple is one ``booked_slots`` row guarded by a
unique constraint, so reserving a slot is a single insert whether or not the
date already has bookings. Two requests racing for the same slot cannot both
succeed: the loser's insert fails at the constraint and is reported exactly
like a sequential double booking.

Neither function commits. Callers commit the reservation together with the
appointment change it belongs to.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clinicbook.core.exceptions import DoctorUnavailable, SlotAlreadyBooked
from clinicbook.models.doctor import BookedSlot, Doctor

logger = logging.getLogger(__name__)


def is_booked(db: Session, doctor_id: int, slot_date: str, slot_time: str) -> bool:
    return (
        db.query(BookedSlot.id)
        .filter(
            BookedSlot.doctor_id == doctor_id,
            BookedSlot.slot_date == slot_date,
            BookedSlot.slot_time == slot_time,
        )
        .first()
        is not None
    )


def reserve(db: Session, doctor: Doctor, slot_date: str, slot_time: str) -> BookedSlot:
    """
    Add ``slot_time`` to the doctor's booked times for ``slot_date``.

    Raises DoctorUnavailable when the doctor is not taking bookings and
    SlotAlreadyBooked when the time is already taken for that date. On a
    conflict detected by the database the session is rolled back.
    """
    if not doctor.available:
        raise DoctorUnavailable()

    if is_booked(db, doctor.id, slot_date, slot_time):
        raise SlotAlreadyBooked()

    slot = BookedSlot(doctor_id=doctor.id, slot_date=slot_date, slot_time=slot_time)
    db.add(slot)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info(f"Concurrent booking lost for doctor={doctor.id} {slot_date} {slot_time}")
        raise SlotAlreadyBooked()
    return slot


def release(db: Session, doctor_id: int, slot_date: str, slot_time: str) -> None:
    """Remove the time from the doctor's ledger for that date; absent entries are a no-op."""
    removed = (
        db.query(BookedSlot)
        .filter(
            BookedSlot.doctor_id == doctor_id,
            BookedSlot.slot_date == slot_date,
            BookedSlot.slot_time == slot_time,
        )
        .delete(synchronize_session="fetch")
    )
    if not removed:
        logger.debug(f"No ledger entry to release for doctor={doctor_id} {slot_date} {slot_time}")
