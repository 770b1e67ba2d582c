"""
Profile Service

Reading and editing student profiles. Every read goes through
``can_view_profile``; every successful edit sends the account back to
PENDING for another review.
"""

from typing import Optional

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.constants import MODERATED_PROFILE_FIELDS, MSG_PROFILE_ACCESS_DENIED
from models.exceptions import (
    ContentModerationException,
    DuplicateResourceException,
    PermissionDeniedException,
    ResourceNotFoundException,
)
from repositories.profile_repository import ProfileRepository
from repositories.user_repository import UserRepository
from services.academic_service import AcademicService
from services.moderation_service import ContentModerationService
from services.profile_visibility import can_view_profile
from services.storage_service import StorageService


class ProfileService:
    """Service for profile business logic."""

    @staticmethod
    def build_response(
        user: db_models.User, profile: db_models.Profile
    ) -> schemas.ProfileResponse:
        return schemas.ProfileResponse(
            id=profile.id,
            user_id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            birth_date=user.birth_date,
            profile_photo=profile.profile_photo,
            bio=profile.bio,
            phone=profile.phone,
            linkedin=profile.linkedin,
            github=profile.github,
            interests=profile.interests,
            visibility=profile.visibility,
            year=user.year,
            faculty=user.faculty.name if user.faculty else None,
            department=user.department.name if user.department else None,
            role=user.role,
            status=user.status,
            rejection_reason=user.rejection_reason,
            national_id_scan=user.national_id_scan,
        )

    @staticmethod
    def _load(db: Session, user_id: int) -> tuple[db_models.User, db_models.Profile]:
        user = UserRepository(db).get_with_academics(user_id)
        if user is None:
            raise ResourceNotFoundException("User", "id", user_id)
        if user.profile is None:
            raise ResourceNotFoundException("Profile", "userId", user_id)
        return user, user.profile

    @staticmethod
    def get_own_profile(db: Session, user_id: int) -> schemas.ProfileResponse:
        user, profile = ProfileService._load(db, user_id)
        return ProfileService.build_response(user, profile)

    @staticmethod
    def get_user_profile(
        db: Session,
        target_user_id: int,
        requester: Optional[db_models.User],
    ) -> schemas.ProfileResponse:
        """
        Read another user's profile, subject to the visibility policy.

        Args:
            db: Database session
            target_user_id: Profile owner
            requester: Authenticated caller, or None for anonymous access

        Raises:
            ResourceNotFoundException: If the user or profile does not exist
            PermissionDeniedException: If the caller may not see the profile
        """
        user, profile = ProfileService._load(db, target_user_id)
        allowed = can_view_profile(
            profile,
            user,
            requester_id=requester.id if requester else None,
            requester_role=requester.role if requester else None,
        )
        if not allowed:
            raise PermissionDeniedException(MSG_PROFILE_ACCESS_DENIED)
        return ProfileService.build_response(user, profile)

    @staticmethod
    def get_public_approved_students(db: Session) -> list[schemas.ProfileResponse]:
        """Directory listing: approved students with PUBLIC visibility."""
        profiles = ProfileRepository(db).get_public_approved_students()
        return [ProfileService.build_response(p.user, p) for p in profiles]

    @staticmethod
    def update_profile(
        db: Session, user_id: int, data: schemas.UpdateProfileRequest
    ) -> schemas.ProfileResponse:
        """
        Apply a partial edit and resubmit the account for review.

        Moderated fields are checked first; on a hit one FlaggedContent row is
        written per offending field and nothing else changes.

        Raises:
            ResourceNotFoundException: If the user, profile, faculty or
                department does not exist
            ContentModerationException: If a moderated field contains banned words
            DuplicateResourceException: If the new national ID belongs to
                someone else
            InvalidStateException: If the faculty/department/year combination
                is invalid
        """
        user, profile = ProfileService._load(db, user_id)

        to_check = {
            field: getattr(data, field)
            for field in MODERATED_PROFILE_FIELDS
            if getattr(data, field) is not None
        }
        violations = ContentModerationService.validate_fields(db, to_check)
        if violations:
            for field, words in violations.items():
                ContentModerationService.log_violation(
                    db, user_id, field, to_check[field], words
                )
            raise ContentModerationException(violations)

        if data.national_id is not None and data.national_id != user.national_id:
            if UserRepository(db).national_id_exists(
                data.national_id, exclude_user_id=user_id
            ):
                raise DuplicateResourceException(
                    "User", "nationalId", data.national_id
                )
            user.national_id = data.national_id

        if (
            data.faculty_id is not None
            or data.department_id is not None
            or data.year is not None
        ):
            faculty, department = AcademicService.resolve_placement(
                db,
                data.faculty_id if data.faculty_id is not None else user.faculty_id,
                (
                    data.department_id
                    if data.department_id is not None
                    else user.department_id
                ),
                data.year if data.year is not None else user.year,
            )
            user.faculty = faculty
            user.department = department
            if data.year is not None:
                user.year = data.year

        if data.first_name is not None:
            user.first_name = data.first_name
        if data.last_name is not None:
            user.last_name = data.last_name

        if data.bio is not None:
            profile.bio = data.bio
        if data.phone is not None:
            profile.phone = data.phone
        if data.linkedin is not None:
            profile.linkedin = data.linkedin
        if data.github is not None:
            profile.github = data.github
        if data.interests is not None:
            profile.interests = data.interests
        if data.visibility is not None:
            profile.visibility = data.visibility

        user.status = db_models.UserStatus.PENDING
        user.rejection_reason = None
        db.commit()
        db.refresh(user)
        db.refresh(profile)

        logger.info(f"Profile updated for user {user_id}; status reset to PENDING")
        return ProfileService.build_response(user, profile)

    @staticmethod
    def update_visibility(
        db: Session, user_id: int, visibility: db_models.ProfileVisibility
    ) -> schemas.ProfileResponse:
        user, profile = ProfileService._load(db, user_id)
        profile.visibility = visibility
        db.commit()
        db.refresh(profile)
        logger.info(f"User {user_id} set profile visibility to {visibility.value}")
        return ProfileService.build_response(user, profile)

    @staticmethod
    def upload_profile_photo(
        db: Session, user_id: int, file: UploadFile, storage: StorageService
    ) -> schemas.ProfilePhotoResponse:
        """
        Replace the profile photo. The previous object is removed best-effort.

        Raises:
            ResourceNotFoundException: If the profile does not exist
            InvalidFileException: If the image fails validation
            StorageException: If the upload fails
        """
        profile = ProfileRepository(db).get_by_user_id(user_id)
        if profile is None:
            raise ResourceNotFoundException("Profile", "userId", user_id)

        storage.delete_quietly(profile.profile_photo)
        photo_url = storage.upload_profile_photo(user_id, file)

        profile.profile_photo = photo_url
        db.commit()
        return schemas.ProfilePhotoResponse(
            photo_url=photo_url, message="Profile photo uploaded successfully"
        )

    @staticmethod
    def upload_national_id_scan(
        db: Session, user_id: int, file: UploadFile, storage: StorageService
    ) -> schemas.NationalIdScanResponse:
        """
        Replace the national ID scan. The previous object is removed best-effort.

        Raises:
            ResourceNotFoundException: If the user does not exist
            InvalidFileException: If the image fails validation
            StorageException: If the upload fails
        """
        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", "id", user_id)

        storage.delete_quietly(user.national_id_scan)
        scan_url = storage.upload_national_id_scan(user_id, file)

        user.national_id_scan = scan_url
        db.commit()
        return schemas.NationalIdScanResponse(
            scan_url=scan_url, message="National ID scan uploaded successfully"
        )
