import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from clinicbook import crud
from clinicbook.api import deps
from clinicbook.core import security
from clinicbook.core.exceptions import Conflict, NotFound, ValidationFailed
from clinicbook.schemas.appointment import (
    Appointment,
    AppointmentListResponse,
    AppointmentResponse,
)
from clinicbook.schemas.common import Envelope
from clinicbook.schemas.doctor import AdminDoctorListResponse, Doctor, DoctorCreate
from clinicbook.schemas.user import Token, UserLogin
from clinicbook.services import appointments as appointment_service
from clinicbook.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter()

DOCTOR_IMAGE_FOLDER = "doctors"


@router.post("/login", response_model=Token)
def admin_login(credentials: UserLogin) -> Any:
    """
    Sign in to the admin dashboard with the configured credentials.
    """
    if not security.verify_admin_credentials(credentials.email, credentials.password):
        raise ValidationFailed("Invalid credentials")
    return Token(token=security.create_access_token(credentials.email, is_admin=True))


@router.post("/doctors", response_model=Envelope)
def add_doctor(
    *,
    db: Session = Depends(deps.get_db),
    admin: str = Depends(deps.get_current_admin),
    store: BlobStore = Depends(deps.get_blob_store),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    speciality: Optional[str] = Form(None),
    degree: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    about: Optional[str] = Form(""),
    fees: Optional[float] = Form(None),
    address: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Add a doctor to the directory. Multipart so a photo can ride along.
    """
    if not all([name, email, password, speciality, degree, experience]) or fees is None:
        raise ValidationFailed("Missing Details")

    try:
        doctor_in = DoctorCreate(
            name=name,
            email=email,
            password=password,
            speciality=speciality,
            degree=degree,
            experience=experience,
            about=about or "",
            fees=fees,
            address=json.loads(address) if address else {},
        )
    except ValueError as e:
        # ValidationError and JSONDecodeError both land here
        messages = [err["msg"] for err in e.errors()] if isinstance(e, ValidationError) else [str(e)]
        raise ValidationFailed("; ".join(messages))

    if crud.doctor.get_by_email(db, email=doctor_in.email):
        raise Conflict("A doctor with this email already exists")

    image_url = None
    if image is not None and image.filename:
        image_url = store.upload(
            image.file.read(),
            image.filename,
            folder=DOCTOR_IMAGE_FOLDER,
            content_type=image.content_type,
        )

    doctor = crud.doctor.create(db, obj_in=doctor_in, image=image_url)
    logger.info(f"Admin {admin} added doctor {doctor.id}")
    return Envelope(message="Doctor Added")


@router.get("/doctors", response_model=AdminDoctorListResponse)
def list_doctors(
    db: Session = Depends(deps.get_db),
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    doctors = crud.doctor.get_all_with_slots(db)
    return AdminDoctorListResponse(doctors=[Doctor.model_validate(d) for d in doctors])


@router.post("/doctors/{doctor_id}/availability", response_model=Envelope)
def change_availability(
    *,
    db: Session = Depends(deps.get_db),
    doctor_id: int,
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    doctor = crud.doctor.get(db, id=doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")
    crud.doctor.toggle_availability(db, db_obj=doctor)
    return Envelope(message="Availability Changed")


@router.get("/appointments", response_model=AppointmentListResponse)
def list_all_appointments(
    db: Session = Depends(deps.get_db),
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    appointments = crud.appointment.get_all(db)
    return AppointmentListResponse(
        appointments=[Appointment.model_validate(a) for a in appointments]
    )


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    *,
    db: Session = Depends(deps.get_db),
    appointment_id: int,
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    appointment = appointment_service.admin_cancel(db, appointment_id=appointment_id)
    return AppointmentResponse(
        message="Appointment Cancelled",
        appointment=Appointment.model_validate(appointment),
    )


@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    *,
    db: Session = Depends(deps.get_db),
    appointment_id: int,
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    appointment = appointment_service.complete(db, appointment_id=appointment_id)
    return AppointmentResponse(
        message="Appointment Completed",
        appointment=Appointment.model_validate(appointment),
    )
