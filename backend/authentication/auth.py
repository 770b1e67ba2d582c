from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBearer,
    OAuth2PasswordBearer,
)
import jwt
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.constants import MSG_ADMIN_REQUIRED
from models.exceptions import AuthenticationException, PermissionDeniedException
from repositories.database import get_db

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login")
optional_oauth2_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: db_models.User) -> str:
    """Session token for a user: subject is the email, plus id and role claims."""
    return create_access_token(
        data={"sub": user.email, "userId": user.id, "role": user.role.value}
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a session token.

    Raises:
        jwt.exceptions.InvalidTokenError: If the signature or expiry is invalid.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def _user_from_payload(db: Session, payload: dict) -> Optional[db_models.User]:
    email_value = payload.get("sub")
    if email_value is None:
        return None
    token_data = schemas.TokenData(email=str(email_value))
    return (
        db.query(db_models.User)
        .filter(db_models.User.email == token_data.email)
        .first()
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> db_models.User:
    """
    Get the current authenticated user from the JWT token.

    Raises:
        AuthenticationException: If credentials are invalid or user not found.
    """
    try:
        payload = decode_access_token(token)
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Could not validate credentials")

    user = _user_from_payload(db, payload)
    if user is None:
        raise AuthenticationException("Could not validate credentials")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(
        optional_oauth2_scheme
    ),
    db: Session = Depends(get_db),
) -> Optional[db_models.User]:
    """
    Get current user if authenticated, otherwise return None.

    If no credentials are provided, returns None (anonymous access).
    If credentials are provided but expired, raises AuthenticationException
    so the user knows to re-login (returns 401).
    If credentials are malformed or invalid, returns None.
    """
    if credentials is None:
        return None

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.exceptions.ExpiredSignatureError:
        raise AuthenticationException("Session expired. Please log in again.")
    except jwt.exceptions.InvalidTokenError:
        return None
    return _user_from_payload(db, payload)


async def get_admin_user(
    current_user: db_models.User = Depends(get_current_user),
) -> db_models.User:
    """
    Require the ADMIN role.

    The role is read from the stored account, so a demotion takes effect
    before the caller's token expires.

    Raises:
        PermissionDeniedException: If the user is not an admin.
    """
    if current_user.role != db_models.UserRole.ADMIN:
        raise PermissionDeniedException(MSG_ADMIN_REQUIRED)
    return current_user
