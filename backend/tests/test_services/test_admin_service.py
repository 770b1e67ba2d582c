"""Tests for AdminService: approval state machine, verification and roles."""

from datetime import timedelta

import pytest

import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models import constants
from models.exceptions import (
    InvalidStateException,
    PermissionDeniedException,
    ResourceNotFoundException,
    VerificationTokenExpiredException,
    VerificationTokenInvalidException,
)
from services.admin_service import AdminService


class TestApproveUser:
    """Test cases for approve_user."""

    def test_approve_verified_pending_user(
        self, db_session, pending_student, admin_user, mailer, email_provider
    ):
        pending_student.email_verified = True
        db_session.commit()

        result = AdminService.approve_user(
            db_session, pending_student.id, admin_user.id, mailer
        )

        assert result.status == db_models.UserStatus.APPROVED
        db_session.refresh(pending_student)
        assert pending_student.status == db_models.UserStatus.APPROVED
        assert email_provider.sent[-1]["subject"] == "CampusCard - Account Approved"

    def test_approve_unverified_user_fails(
        self, db_session, pending_student, admin_user, mailer, email_provider
    ):
        with pytest.raises(InvalidStateException) as exc_info:
            AdminService.approve_user(
                db_session, pending_student.id, admin_user.id, mailer
            )

        assert exc_info.value.message == constants.MSG_UNVERIFIED_APPROVAL
        db_session.refresh(pending_student)
        assert pending_student.status == db_models.UserStatus.PENDING
        assert email_provider.sent == []

    def test_approve_non_pending_user_fails(
        self, db_session, student, admin_user, mailer
    ):
        with pytest.raises(InvalidStateException) as exc_info:
            AdminService.approve_user(db_session, student.id, admin_user.id, mailer)

        assert exc_info.value.message == constants.MSG_NOT_PENDING

    def test_approve_unknown_user(self, db_session, admin_user, mailer):
        with pytest.raises(ResourceNotFoundException):
            AdminService.approve_user(db_session, 9999, admin_user.id, mailer)

    def test_email_failure_does_not_fail_approval(
        self, db_session, pending_student, admin_user, email_provider, mailer
    ):
        email_provider.succeed = False
        pending_student.email_verified = True
        db_session.commit()

        result = AdminService.approve_user(
            db_session, pending_student.id, admin_user.id, mailer
        )

        assert result.status == db_models.UserStatus.APPROVED


class TestRejectUser:
    """Test cases for reject_user."""

    def test_reject_stores_reason(
        self, db_session, pending_student, admin_user, mailer, email_provider
    ):
        AdminService.reject_user(
            db_session, pending_student.id, admin_user.id, "Blurry scan", mailer
        )

        db_session.refresh(pending_student)
        assert pending_student.status == db_models.UserStatus.REJECTED
        assert pending_student.rejection_reason == "Blurry scan"
        assert "Blurry scan" in email_provider.sent[-1]["text"]

    def test_reject_does_not_require_verified_email(
        self, db_session, pending_student, admin_user, mailer
    ):
        assert pending_student.email_verified is False

        result = AdminService.reject_user(
            db_session, pending_student.id, admin_user.id, None, mailer
        )

        assert result.status == db_models.UserStatus.REJECTED

    def test_reject_rejected_user_fails(
        self, db_session, pending_student, admin_user, mailer
    ):
        AdminService.reject_user(
            db_session, pending_student.id, admin_user.id, "first", mailer
        )

        with pytest.raises(InvalidStateException):
            AdminService.reject_user(
                db_session, pending_student.id, admin_user.id, "second", mailer
            )

        db_session.refresh(pending_student)
        assert pending_student.rejection_reason == "first"


class TestEmailVerification:
    """Test cases for send_email_verification and verify_email."""

    def test_send_then_verify(
        self, db_session, pending_student, mailer, email_provider
    ):
        token = AdminService.send_email_verification(
            db_session, pending_student.id, mailer
        )

        assert token
        assert token in email_provider.sent[-1]["text"]

        AdminService.verify_email(db_session, pending_student.id, token)

        db_session.refresh(pending_student)
        assert pending_student.email_verified is True
        assert pending_student.email_verification_token is None

        with pytest.raises(InvalidStateException):
            AdminService.verify_email(db_session, pending_student.id, token)

    def test_resend_replaces_token(self, db_session, pending_student, mailer):
        first = AdminService.send_email_verification(
            db_session, pending_student.id, mailer
        )
        second = AdminService.send_email_verification(
            db_session, pending_student.id, mailer
        )

        assert first != second
        with pytest.raises(VerificationTokenInvalidException):
            AdminService.verify_email(db_session, pending_student.id, first)

    def test_send_to_verified_user_fails(self, db_session, student, mailer):
        with pytest.raises(InvalidStateException) as exc_info:
            AdminService.send_email_verification(db_session, student.id, mailer)

        assert exc_info.value.message == constants.MSG_EMAIL_ALREADY_VERIFIED

    def test_verify_without_token_fails(self, db_session, pending_student):
        with pytest.raises(VerificationTokenInvalidException):
            AdminService.verify_email(db_session, pending_student.id, "anything")

    def test_verify_wrong_token_fails(self, db_session, pending_student, mailer):
        AdminService.send_email_verification(db_session, pending_student.id, mailer)

        with pytest.raises(VerificationTokenInvalidException):
            AdminService.verify_email(db_session, pending_student.id, "wrong-token")

        db_session.refresh(pending_student)
        assert pending_student.email_verified is False

    def test_verify_expired_token_fails(self, db_session, pending_student, mailer):
        token = AdminService.send_email_verification(
            db_session, pending_student.id, mailer
        )
        pending_student.email_verification_sent_at = utc_now() - timedelta(hours=25)
        db_session.commit()

        with pytest.raises(VerificationTokenExpiredException) as exc_info:
            AdminService.verify_email(db_session, pending_student.id, token)

        assert exc_info.value.message == "Verification token has expired"

    def test_verify_already_verified_fails(self, db_session, student):
        with pytest.raises(InvalidStateException):
            AdminService.verify_email(db_session, student.id, "token")


class TestChangeUserRole:
    """Test cases for change_user_role."""

    def test_promote_student_case_insensitive(self, db_session, student, admin_user):
        result = AdminService.change_user_role(
            db_session, student.id, " admin ", admin_user.id
        )

        assert result.role == db_models.UserRole.ADMIN

    def test_cannot_change_own_role(self, db_session, admin_user):
        with pytest.raises(PermissionDeniedException) as exc_info:
            AdminService.change_user_role(
                db_session, admin_user.id, "STUDENT", admin_user.id
            )

        assert exc_info.value.message == constants.MSG_SELF_ROLE_CHANGE
        db_session.refresh(admin_user)
        assert admin_user.role == db_models.UserRole.ADMIN

    def test_invalid_role_name(self, db_session, student, admin_user):
        with pytest.raises(InvalidStateException) as exc_info:
            AdminService.change_user_role(
                db_session, student.id, "SUPERUSER", admin_user.id
            )

        assert exc_info.value.message == constants.MSG_INVALID_ROLE

    def test_unknown_user(self, db_session, admin_user):
        with pytest.raises(ResourceNotFoundException):
            AdminService.change_user_role(db_session, 9999, "ADMIN", admin_user.id)


class TestDashboard:
    """Test cases for listings and statistics."""

    def test_dashboard_stats(self, db_session, student, pending_student, admin_user):
        stats = AdminService.get_dashboard_stats(db_session)

        assert stats.total_users == 3
        assert stats.pending_approvals == 1
        assert stats.approved_users == 2
        assert stats.rejected_users == 0
        assert stats.students_count == 2
        assert stats.admins_count == 1
        assert stats.verified_emails == 2
        assert stats.unverified_emails == 1

    def test_pending_users_lists_only_pending(
        self, db_session, student, pending_student
    ):
        pending = AdminService.get_pending_users(db_session)

        assert [u.id for u in pending] == [pending_student.id]
        assert pending[0].faculty_name == "Faculty of Engineering"
        assert pending[0].national_id_scan_url is not None

    def test_user_details_unknown(self, db_session):
        with pytest.raises(ResourceNotFoundException):
            AdminService.get_user_details(db_session, 424242)

    def test_registration_date_format(self, db_session, student):
        details = AdminService.get_user_details(db_session, student.id)

        assert details.registration_date is not None
        assert len(details.registration_date) == len("2024-01-01 00:00:00")
