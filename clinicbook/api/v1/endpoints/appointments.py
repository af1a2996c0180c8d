from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clinicbook import crud, models
from clinicbook.api import deps
from clinicbook.schemas.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
)
from clinicbook.services import appointments as appointment_service

router = APIRouter()


@router.post("", response_model=AppointmentResponse)
def book_appointment(
    *,
    db: Session = Depends(deps.get_db),
    appointment_in: AppointmentCreate,
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Book a doctor's slot for the current patient.
    """
    appointment = appointment_service.book(
        db,
        user=current_user,
        doc_id=appointment_in.doc_id,
        slot_date=appointment_in.slot_date,
        slot_time=appointment_in.slot_time,
    )
    return AppointmentResponse(
        message="Appointment Booked",
        appointment=Appointment.model_validate(appointment),
    )


@router.get("", response_model=AppointmentListResponse)
def list_appointments(
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Appointments of the current patient, newest first.
    """
    appointments = crud.appointment.get_patient_appointments(db, user_id=current_user.id)
    return AppointmentListResponse(
        appointments=[Appointment.model_validate(a) for a in appointments]
    )


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    *,
    db: Session = Depends(deps.get_db),
    appointment_id: int,
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Cancel one of the current patient's appointments and free its slot.
    """
    appointment = appointment_service.cancel(
        db, user=current_user, appointment_id=appointment_id
    )
    return AppointmentResponse(
        message="Appointment Cancelled",
        appointment=Appointment.model_validate(appointment),
    )
