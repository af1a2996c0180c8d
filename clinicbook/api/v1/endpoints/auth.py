import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from clinicbook import crud
from clinicbook.api import deps
from clinicbook.core import security
from clinicbook.core.exceptions import Conflict, ValidationFailed
from clinicbook.schemas.user import Token, UserCreate, UserLogin

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 8

_email_adapter = TypeAdapter(EmailStr)


@router.post("/register", response_model=Token)
def register(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create a new patient account and sign them in.
    """
    if not user_in.name or not user_in.email or not user_in.password:
        raise ValidationFailed("Missing Details")

    try:
        _email_adapter.validate_python(user_in.email)
    except ValidationError:
        raise ValidationFailed("Please enter a valid email")

    if len(user_in.password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("Please enter a strong password")

    if crud.user.get_by_email(db, email=user_in.email):
        raise Conflict("A user with this email already exists")

    user = crud.user.create(db, obj_in=user_in)
    logger.info(f"Registered user {user.id}")
    return Token(token=security.create_access_token(user.id))


@router.post("/login", response_model=Token)
def login(
    *,
    db: Session = Depends(deps.get_db),
    credentials: UserLogin,
) -> Any:
    """
    Exchange email and password for a bearer token.
    """
    user = crud.user.get_by_email(db, email=credentials.email)
    if not user:
        raise ValidationFailed("User does not exist")
    if not security.verify_password(credentials.password, user.hashed_password):
        raise ValidationFailed("Invalid credentials")
    return Token(token=security.create_access_token(user.id))
