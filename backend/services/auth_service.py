"""
Authentication Service

Verifies credentials and issues session tokens. Login is allowed in every
approval state; the returned status tells the client what the account may do.
"""

import re

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import create_user_token, verify_password
from models.constants import EMAIL_IDENTIFIER_PATTERN, MSG_LOGIN_SUCCESS
from models.exceptions import InvalidCredentialsException
from repositories.user_repository import UserRepository

_EMAIL_IDENTIFIER = re.compile(EMAIL_IDENTIFIER_PATTERN)


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    def find_by_identifier(db: Session, identifier: str) -> db_models.User | None:
        """
        Look a user up by email or national ID.

        Anything shaped like ``local@domain`` is treated as an email and matched
        case-insensitively; every other identifier is matched against national IDs.
        """
        identifier = identifier.strip()
        repo = UserRepository(db)
        if _EMAIL_IDENTIFIER.match(identifier):
            return repo.get_by_email(identifier.lower())
        return repo.get_by_national_id(identifier)

    @staticmethod
    def login(db: Session, identifier: str, password: str) -> schemas.LoginResponse:
        """
        Authenticate a user and create an access token.

        Args:
            db: Database session
            identifier: Email or national ID
            password: Plaintext password

        Returns:
            LoginResponse with the token and current account state

        Raises:
            InvalidCredentialsException: Unknown identifier or wrong password
                (same message for both)
        """
        user = AuthService.find_by_identifier(db, identifier)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Failed login attempt")
            raise InvalidCredentialsException()

        logger.info(f"User {user.id} logged in (status={user.status.value})")
        return schemas.LoginResponse(
            token=create_user_token(user),
            id=user.id,
            email=user.email,
            role=user.role,
            status=user.status,
            message=MSG_LOGIN_SUCCESS,
        )
