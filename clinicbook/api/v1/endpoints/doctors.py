from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clinicbook import crud
from clinicbook.api import deps
from clinicbook.schemas.doctor import DoctorListResponse, DoctorPublic

router = APIRouter()


@router.get("", response_model=DoctorListResponse)
def list_doctors(db: Session = Depends(deps.get_db)) -> Any:
    """
    Public doctor directory, with each doctor's booked slots for the booking page.
    """
    doctors = crud.doctor.get_all_with_slots(db)
    return DoctorListResponse(doctors=[DoctorPublic.model_validate(d) for d in doctors])
