"""
Admin Service

Approval state machine for student accounts:

    PENDING --approve (email verified)--> APPROVED
    PENDING --reject------------------->  REJECTED

plus email verification, role changes and the dashboard projection.
Notification emails are sent after the transition commits and never fail
the request.
"""

import uuid
from datetime import timedelta

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.time_utils import as_utc, format_timestamp, utc_now
from models import constants
from models.config import settings
from models.exceptions import (
    InvalidStateException,
    PermissionDeniedException,
    ResourceNotFoundException,
    VerificationTokenExpiredException,
    VerificationTokenInvalidException,
)
from repositories.user_repository import UserRepository
from services.email_service import EmailService


class AdminService:
    """Service for account review and administration."""

    @staticmethod
    def to_approval_response(user: db_models.User) -> schemas.UserApprovalResponse:
        profile = user.profile
        return schemas.UserApprovalResponse(
            id=user.id,
            email=user.email,
            email_verified=user.email_verified,
            national_id=user.national_id,
            first_name=user.first_name,
            last_name=user.last_name,
            birth_date=user.birth_date,
            status=user.status,
            role=user.role,
            year=user.year,
            faculty_name=user.faculty.name if user.faculty else None,
            department_name=user.department.name if user.department else None,
            profile_photo_url=profile.profile_photo if profile else None,
            national_id_scan_url=user.national_id_scan,
            registration_date=format_timestamp(user.created_at),
        )

    @staticmethod
    def _locked_user(db: Session, user_id: int) -> db_models.User:
        user = UserRepository(db).get_for_update(user_id)
        if user is None:
            raise ResourceNotFoundException("User", "id", user_id)
        return user

    @staticmethod
    def get_dashboard_stats(db: Session) -> schemas.AdminDashboardStats:
        repo = UserRepository(db)
        by_status = repo.count_by_status()
        by_role = repo.count_by_role()
        return schemas.AdminDashboardStats(
            total_users=repo.count(),
            pending_approvals=by_status.get(db_models.UserStatus.PENDING, 0),
            approved_users=by_status.get(db_models.UserStatus.APPROVED, 0),
            rejected_users=by_status.get(db_models.UserStatus.REJECTED, 0),
            students_count=by_role.get(db_models.UserRole.STUDENT, 0),
            admins_count=by_role.get(db_models.UserRole.ADMIN, 0),
            verified_emails=repo.count_verified(True),
            unverified_emails=repo.count_verified(False),
        )

    @staticmethod
    def get_pending_users(db: Session) -> list[schemas.UserApprovalResponse]:
        users = UserRepository(db).get_by_status(db_models.UserStatus.PENDING)
        return [AdminService.to_approval_response(u) for u in users]

    @staticmethod
    def get_all_users(db: Session) -> list[schemas.UserApprovalResponse]:
        users = UserRepository(db).get_all_users()
        return [AdminService.to_approval_response(u) for u in users]

    @staticmethod
    def get_user_details(db: Session, user_id: int) -> schemas.UserApprovalResponse:
        """
        Raises:
            ResourceNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_with_academics(user_id)
        if user is None:
            raise ResourceNotFoundException("User", "id", user_id)
        return AdminService.to_approval_response(user)

    @staticmethod
    def approve_user(
        db: Session, user_id: int, admin_id: int, mailer: EmailService
    ) -> schemas.UserApprovalResponse:
        """
        Move a PENDING account with a verified email to APPROVED.

        Args:
            db: Database session
            user_id: Account under review
            admin_id: Acting admin
            mailer: Used for the best-effort approval notice

        Raises:
            ResourceNotFoundException: If the user does not exist
            InvalidStateException: If the account is not PENDING or its email
                is unverified
        """
        user = AdminService._locked_user(db, user_id)

        if user.status != db_models.UserStatus.PENDING:
            raise InvalidStateException(constants.MSG_NOT_PENDING)
        if not user.email_verified:
            raise InvalidStateException(constants.MSG_UNVERIFIED_APPROVAL)

        user.status = db_models.UserStatus.APPROVED
        user.rejection_reason = None
        db.commit()
        db.refresh(user)
        logger.info(f"User {user_id} approved by admin {admin_id}")

        if not mailer.send_approval_email(user.email, user.first_name):
            logger.warning(f"Approval email for user {user_id} was not delivered")
        return AdminService.to_approval_response(user)

    @staticmethod
    def reject_user(
        db: Session,
        user_id: int,
        admin_id: int,
        reason: str | None,
        mailer: EmailService,
    ) -> schemas.UserApprovalResponse:
        """
        Move a PENDING account to REJECTED, storing the reason as given.

        Raises:
            ResourceNotFoundException: If the user does not exist
            InvalidStateException: If the account is not PENDING
        """
        user = AdminService._locked_user(db, user_id)

        if user.status != db_models.UserStatus.PENDING:
            raise InvalidStateException(constants.MSG_NOT_PENDING)

        user.status = db_models.UserStatus.REJECTED
        user.rejection_reason = reason
        db.commit()
        db.refresh(user)
        logger.info(f"User {user_id} rejected by admin {admin_id}")

        if not mailer.send_rejection_email(user.email, user.first_name, reason):
            logger.warning(f"Rejection email for user {user_id} was not delivered")
        return AdminService.to_approval_response(user)

    @staticmethod
    def send_email_verification(
        db: Session, user_id: int, mailer: EmailService
    ) -> str:
        """
        Issue a fresh verification token and email it.

        Delivery is best-effort; the token is stored either way.

        Returns:
            The new token

        Raises:
            ResourceNotFoundException: If the user does not exist
            InvalidStateException: If the email is already verified
        """
        user = AdminService._locked_user(db, user_id)

        if user.email_verified:
            raise InvalidStateException(constants.MSG_EMAIL_ALREADY_VERIFIED)

        token = str(uuid.uuid4())
        user.email_verification_token = token
        user.email_verification_sent_at = utc_now()
        db.commit()
        logger.info(f"Verification token issued for user {user_id}")

        if not mailer.send_verification_email(user.email, user.id, token):
            logger.warning(f"Verification email for user {user_id} was not delivered")
        return token

    @staticmethod
    def verify_email(db: Session, user_id: int, token: str) -> None:
        """
        Mark an email as verified if ``token`` matches and has not expired.

        Raises:
            ResourceNotFoundException: If the user does not exist
            InvalidStateException: If the email is already verified
            VerificationTokenInvalidException: If no token is stored or it differs
            VerificationTokenExpiredException: If the token is older than
                ``EMAIL_VERIFICATION_EXPIRE_HOURS``
        """
        user = AdminService._locked_user(db, user_id)

        if user.email_verified:
            raise InvalidStateException(constants.MSG_EMAIL_ALREADY_VERIFIED)

        if (
            user.email_verification_token is None
            or user.email_verification_token != token
        ):
            raise VerificationTokenInvalidException()

        sent_at = user.email_verification_sent_at
        lifetime = timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS)
        if sent_at is None or as_utc(sent_at) + lifetime < utc_now():
            raise VerificationTokenExpiredException()

        user.email_verified = True
        user.email_verification_token = None
        db.commit()
        logger.info(f"Email verified for user {user_id}")

    @staticmethod
    def change_user_role(
        db: Session, user_id: int, new_role: str, admin_id: int
    ) -> schemas.UserApprovalResponse:
        """
        Set a user's role to STUDENT or ADMIN (case-insensitive).

        Raises:
            ResourceNotFoundException: If the user does not exist
            PermissionDeniedException: If an admin targets their own account
            InvalidStateException: If the role name is not recognised
        """
        user = AdminService._locked_user(db, user_id)

        if user_id == admin_id:
            raise PermissionDeniedException(constants.MSG_SELF_ROLE_CHANGE)

        try:
            role = db_models.UserRole(new_role.strip().upper())
        except ValueError:
            raise InvalidStateException(constants.MSG_INVALID_ROLE)

        user.role = role
        db.commit()
        db.refresh(user)
        logger.info(f"User {user_id} role set to {role.value} by admin {admin_id}")
        return AdminService.to_approval_response(user)
