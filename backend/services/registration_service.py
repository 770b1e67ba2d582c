"""
Registration Service

Creates a PENDING student together with their profile and stores the
national ID scan.
"""

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import get_password_hash
from models.constants import MSG_SIGNUP_SUCCESS
from models.exceptions import DuplicateResourceException
from repositories.user_repository import UserRepository
from services.academic_service import AcademicService
from services.storage_service import StorageService


class RegistrationService:
    """Service for student sign-up."""

    @staticmethod
    def register(
        db: Session,
        data: schemas.SignupRequest,
        national_id_scan: UploadFile,
        storage: StorageService,
    ) -> schemas.SignupResponse:
        """
        Register a new student.

        Checks run in this order: email free, national ID free, faculty exists,
        department exists and belongs to the faculty, year within range.

        The user row is flushed to obtain its ID, the scan is uploaded under
        that ID, and only then is the transaction committed. A failed upload
        rolls the whole registration back.

        Args:
            db: Database session
            data: Validated sign-up fields
            national_id_scan: Uploaded scan image
            storage: Object storage gateway

        Returns:
            SignupResponse for the new PENDING account

        Raises:
            DuplicateResourceException: Email or national ID already registered,
                including a concurrent sign-up that commits first
            ResourceNotFoundException: Unknown faculty or department
            InvalidStateException: Department/faculty mismatch or bad year
            InvalidFileException: Scan is empty, too large or not an image
            StorageException: Object store unavailable
        """
        repo = UserRepository(db)

        if repo.email_exists(data.email):
            raise DuplicateResourceException("User", "email", data.email)
        if repo.national_id_exists(data.national_id):
            raise DuplicateResourceException("User", "nationalId", data.national_id)

        faculty, department = AcademicService.resolve_placement(
            db, data.faculty_id, data.department_id, data.year
        )

        user = db_models.User(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            birth_date=data.date_of_birth,
            national_id=data.national_id,
            role=db_models.UserRole.STUDENT,
            status=db_models.UserStatus.PENDING,
            email_verified=False,
            year=data.year,
            faculty_id=faculty.id,
            department_id=department.id,
        )
        user.profile = db_models.Profile(visibility=db_models.ProfileVisibility.PUBLIC)
        repo.add(user)

        try:
            repo.flush()
            user.national_id_scan = storage.upload_national_id_scan(
                user.id, national_id_scan
            )
            repo.commit()
        except IntegrityError:
            repo.rollback()
            logger.warning(f"Registration for {data.email} lost a uniqueness race")
            if repo.email_exists(data.email):
                raise DuplicateResourceException("User", "email", data.email)
            raise DuplicateResourceException("User", "nationalId", data.national_id)
        except Exception:
            repo.rollback()
            logger.warning(f"Registration for {data.email} rolled back")
            raise

        logger.info(f"User registered: id={user.id}")
        return schemas.SignupResponse(
            id=user.id,
            email=user.email,
            status=user.status,
            message=MSG_SIGNUP_SUCCESS,
        )
