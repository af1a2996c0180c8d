import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from clinicbook import crud, models
from clinicbook.api import deps
from clinicbook.core.exceptions import ValidationFailed
from clinicbook.schemas.common import Envelope
from clinicbook.schemas.user import Address, ProfileResponse, User, UserUpdate
from clinicbook.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_IMAGE_FOLDER = "profiles"


def _parse_address(raw: Optional[str]) -> Optional[Address]:
    if not raw:
        return None
    try:
        return Address(**json.loads(raw))
    except (ValueError, TypeError, ValidationError):
        raise ValidationFailed("Address must be a JSON object with line1 and line2")


@router.get("", response_model=ProfileResponse)
def read_profile(
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return ProfileResponse(user_data=User.model_validate(current_user))


@router.put("", response_model=Envelope)
def update_profile(
    *,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
    store: BlobStore = Depends(deps.get_blob_store),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    dob: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Update the caller's profile. Multipart so an image can ride along.
    """
    if not name or not phone or not dob or not gender:
        raise ValidationFailed("Data Missing")

    profile_in = UserUpdate(
        name=name,
        phone=phone,
        dob=dob,
        gender=gender,
        address=_parse_address(address),
    )

    if image is not None and image.filename:
        profile_in.image = store.upload(
            image.file.read(),
            image.filename,
            folder=PROFILE_IMAGE_FOLDER,
            content_type=image.content_type,
        )

    crud.user.update_profile(db, db_obj=current_user, obj_in=profile_in)
    logger.info(f"Profile updated for user {current_user.id}")
    return Envelope(message="Profile Updated")
