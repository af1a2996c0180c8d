from datetime import datetime, timedelta, timezone
from typing import Any, Union
from jose import jwt
from passlib.context import CryptContext
from clinicbook.core.config import settings
import hmac

# Export the algorithm constant for use in other modules
ALGORITHM = settings.ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def create_access_token(subject: Union[str, Any], expires_delta: timedelta = None, is_admin: bool = False) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject), "is_admin": is_admin}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_admin_credentials(email: str, password: str) -> bool:
    """
    Compare admin login against the configured dashboard credentials
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return False
    email_ok = hmac.compare_digest(email.encode("utf-8"), settings.ADMIN_EMAIL.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return email_ok and password_ok
