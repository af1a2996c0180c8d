from functools import lru_cache
from typing import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from clinicbook import crud, models, schemas
from clinicbook.core import security
from clinicbook.core.config import settings
from clinicbook.db.session import SessionLocal
from clinicbook.services.blob_store import BlobStore, build_blob_store
from clinicbook.services.payments import (
    RazorpayGateway,
    StripeGateway,
    build_razorpay_gateway,
    build_stripe_gateway,
)

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _decode_token(token: str) -> schemas.TokenPayload:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[security.ALGORITHM]
        )
        return schemas.TokenPayload(**payload)
    except (jwt.JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not Authorized Login Again",
        )


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> models.User:
    token_data = _decode_token(token)
    if token_data.is_admin or not token_data.sub or not token_data.sub.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not Authorized Login Again",
        )
    user = crud.user.get(db, id=int(token_data.sub))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_current_admin(token: str = Depends(reusable_oauth2)) -> str:
    token_data = _decode_token(token)
    if not token_data.is_admin or token_data.sub != settings.ADMIN_EMAIL:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not Authorized Login Again",
        )
    return token_data.sub


@lru_cache()
def get_blob_store() -> BlobStore:
    return build_blob_store(settings)


@lru_cache()
def get_razorpay_gateway() -> RazorpayGateway:
    return build_razorpay_gateway(settings)


@lru_cache()
def get_stripe_gateway() -> StripeGateway:
    return build_stripe_gateway(settings)
