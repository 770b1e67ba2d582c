"""Admin endpoints: account review, email verification, roles and moderation.

Every route requires the ADMIN role via ``auth.get_admin_user``.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from repositories.database import get_db
from services import AdminService, ContentModerationService
from services.email_service import EmailService, get_email_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard/stats", response_model=schemas.AdminDashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.AdminDashboardStats:
    """Counts of users by status, role and email verification."""
    return AdminService.get_dashboard_stats(db)


@router.get("/users/pending", response_model=List[schemas.UserApprovalResponse])
def get_pending_users(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> List[schemas.UserApprovalResponse]:
    return AdminService.get_pending_users(db)


@router.get("/users", response_model=List[schemas.UserApprovalResponse])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> List[schemas.UserApprovalResponse]:
    return AdminService.get_all_users(db)


@router.get("/users/{user_id}", response_model=schemas.UserApprovalResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.UserApprovalResponse:
    return AdminService.get_user_details(db, user_id)


@router.post("/users/approve-reject", response_model=schemas.UserApprovalResponse)
def approve_or_reject_user(
    decision: schemas.ApprovalDecisionRequest,
    db: Session = Depends(get_db),
    mailer: EmailService = Depends(get_email_service),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.UserApprovalResponse:
    """
    Approve or reject a PENDING account.

    Approval additionally requires a verified email.
    Domain exceptions are caught by centralized exception handlers.
    """
    if decision.approved:
        return AdminService.approve_user(db, decision.user_id, current_user.id, mailer)
    return AdminService.reject_user(
        db, decision.user_id, current_user.id, decision.rejection_reason, mailer
    )


@router.post(
    "/users/{user_id}/send-verification",
    response_model=schemas.SendVerificationResponse,
    response_model_exclude_none=True,
)
def send_verification(
    user_id: int,
    db: Session = Depends(get_db),
    mailer: EmailService = Depends(get_email_service),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.SendVerificationResponse:
    """
    Issue and email a verification token.

    In testing mode the token is echoed back so it can be used directly.
    """
    token = AdminService.send_email_verification(db, user_id, mailer)
    if settings.TESTING_MODE:
        return schemas.SendVerificationResponse(
            message="Verification email sent (testing mode)",
            token=token,
            user_id=user_id,
        )
    return schemas.SendVerificationResponse(
        message="Verification email sent successfully",
        info="User will receive email with verification link",
    )


@router.post("/users/{user_id}/verify-email/{token}", response_model=schemas.MessageResponse)
def verify_email(
    user_id: int,
    token: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.MessageResponse:
    AdminService.verify_email(db, user_id, token)
    return schemas.MessageResponse(message="Email verified successfully")


@router.post("/users/{user_id}/change-role", response_model=schemas.UserApprovalResponse)
def change_role(
    user_id: int,
    body: schemas.ChangeRoleRequest,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.UserApprovalResponse:
    return AdminService.change_user_role(db, user_id, body.role, current_user.id)


@router.get("/banned-words", response_model=List[schemas.BannedWordResponse])
def list_banned_words(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> List[db_models.BannedWord]:
    return ContentModerationService.list_banned_words(db)


@router.post("/banned-words", response_model=schemas.BannedWordResponse)
def add_banned_word(
    body: schemas.AddBannedWordRequest,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.BannedWord:
    return ContentModerationService.add_banned_word(db, body.word)


@router.delete("/banned-words/{word_id}", response_model=schemas.MessageResponse)
def delete_banned_word(
    word_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.MessageResponse:
    ContentModerationService.remove_banned_word(db, word_id)
    return schemas.MessageResponse(message="Banned word deleted successfully")


@router.get("/flagged-content", response_model=List[schemas.FlaggedContentResponse])
def list_flagged_content(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> List[schemas.FlaggedContentResponse]:
    """Moderation audit trail, newest first."""
    return ContentModerationService.list_flagged_content(db)
