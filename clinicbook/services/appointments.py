"""
Appointment lifecycle: booking, cancellation and completion.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clinicbook import crud
from clinicbook.core.exceptions import Conflict, NotFound, SlotAlreadyBooked, Unauthorized
from clinicbook.models.appointment import Appointment
from clinicbook.models.user import User
from clinicbook.services import slot_ledger

logger = logging.getLogger(__name__)


def book(db: Session, *, user: User, doc_id: int, slot_date: str, slot_time: str) -> Appointment:
    doctor = crud.doctor.get(db, id=doc_id)
    if not doctor:
        raise NotFound("Doctor not found")

    slot_ledger.reserve(db, doctor, slot_date, slot_time)

    appointment = Appointment(
        user_id=user.id,
        doc_id=doctor.id,
        user_data=user.snapshot(),
        doc_data=doctor.snapshot(),
        amount=doctor.fees,
        slot_date=slot_date,
        slot_time=slot_time,
        cancelled=False,
        payment=False,
        is_completed=False,
    )
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise SlotAlreadyBooked()
    db.refresh(appointment)
    logger.info(f"Appointment {appointment.id} booked: doctor={doctor.id} {slot_date} {slot_time}")
    return appointment


def _cancel(db: Session, appointment: Appointment) -> Appointment:
    if appointment.cancelled:
        raise Conflict("Appointment already cancelled")
    if appointment.is_completed:
        raise Conflict("Appointment already completed")

    appointment.cancelled = True
    db.add(appointment)
    slot_ledger.release(db, appointment.doc_id, appointment.slot_date, appointment.slot_time)
    db.commit()
    db.refresh(appointment)
    logger.info(f"Appointment {appointment.id} cancelled, slot released")
    return appointment


def cancel(db: Session, *, user: User, appointment_id: int) -> Appointment:
    """Cancel on behalf of the patient who booked it."""
    appointment = crud.appointment.get(db, id=appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")
    if appointment.user_id != user.id:
        raise Unauthorized()
    return _cancel(db, appointment)


def admin_cancel(db: Session, *, appointment_id: int) -> Appointment:
    appointment = crud.appointment.get(db, id=appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")
    return _cancel(db, appointment)


def complete(db: Session, *, appointment_id: int) -> Appointment:
    """Mark an appointment as completed. The slot stays booked."""
    appointment = crud.appointment.get(db, id=appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")
    if appointment.cancelled:
        raise Conflict("Appointment already cancelled")
    return crud.appointment.mark_completed(db, db_obj=appointment)


def get_payable(db: Session, *, user: User, appointment_id: int) -> Appointment:
    """Load an appointment the caller may pay for."""
    appointment = crud.appointment.get(db, id=appointment_id)
    if not appointment or appointment.cancelled:
        raise NotFound("Appointment Cancelled or not found")
    if appointment.user_id != user.id:
        raise Unauthorized()
    return appointment
