"""Profile endpoints.

``GET /profile/public-students`` and ``GET /profile/{user_id}`` accept
anonymous callers; visibility rules decide what they may see.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import ProfileService
from services.storage_service import StorageService, get_storage_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=schemas.ProfileResponse)
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.ProfileResponse:
    return ProfileService.get_own_profile(db, current_user.id)


@router.put("", response_model=schemas.ProfileResponse)
def update_my_profile(
    update: schemas.UpdateProfileRequest,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.ProfileResponse:
    """
    Edit the caller's profile and resubmit it for approval.

    Text containing banned words is rejected and recorded for admins.
    """
    return ProfileService.update_profile(db, current_user.id, update)


@router.get("/public-students", response_model=List[schemas.ProfileResponse])
def get_public_students(
    db: Session = Depends(get_db),
) -> List[schemas.ProfileResponse]:
    """Directory of approved students with public profiles."""
    return ProfileService.get_public_approved_students(db)


@router.put("/visibility", response_model=schemas.ProfileResponse)
def update_visibility(
    body: schemas.UpdateVisibilityRequest,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.ProfileResponse:
    return ProfileService.update_visibility(db, current_user.id, body.visibility)


@router.post("/photo", response_model=schemas.ProfilePhotoResponse)
def upload_photo(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.ProfilePhotoResponse:
    return ProfileService.upload_profile_photo(db, current_user.id, file, storage)


@router.post("/national-id-scan", response_model=schemas.NationalIdScanResponse)
def upload_national_id_scan(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.NationalIdScanResponse:
    return ProfileService.upload_national_id_scan(db, current_user.id, file, storage)


@router.get("/{user_id}", response_model=schemas.ProfileResponse)
def get_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> schemas.ProfileResponse:
    """Read a profile subject to its owner's visibility setting."""
    return ProfileService.get_user_profile(db, user_id, current_user)
