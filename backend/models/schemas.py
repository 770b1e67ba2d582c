import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from models import constants
from models.config import settings
from repositories.db_models import ProfileVisibility, UserRole, UserStatus


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire; accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# Auth Schemas
class SignupRequest(CamelModel):
    """Registration form fields; the ID scan file travels beside them."""

    first_name: str = Field(..., min_length=1, max_length=constants.NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=constants.NAME_MAX_LENGTH)
    date_of_birth: date
    email: EmailStr
    password: str = Field(
        ...,
        min_length=constants.PASSWORD_MIN_LENGTH,
        max_length=constants.PASSWORD_MAX_LENGTH,
    )
    national_id: str = Field(..., pattern=constants.NATIONAL_ID_PATTERN)
    year: int = Field(..., ge=1)
    faculty_id: int
    department_id: int

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def must_be_past(cls, v: date) -> date:
        if v >= date.today():
            raise ValueError("Date of birth must be in the past")
        return v

    @field_validator("email")
    @classmethod
    def university_domain(cls, v: str) -> str:
        if len(v) > constants.EMAIL_MAX_LENGTH:
            raise ValueError(
                f"Email must not exceed {constants.EMAIL_MAX_LENGTH} characters"
            )
        if not v.lower().endswith(settings.ALLOWED_EMAIL_DOMAIN.lower()):
            raise ValueError(f"Email must end with {settings.ALLOWED_EMAIL_DOMAIN}")
        return v.lower()


class SignupResponse(CamelModel):
    id: int
    email: str
    status: UserStatus
    message: str


class LoginRequest(CamelModel):
    identifier: str = Field(..., min_length=1, description="Email or national ID")
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    token: str
    id: int
    email: str
    role: UserRole
    status: UserStatus
    message: str


class TokenData(BaseModel):
    email: Optional[str] = None


# Admin Schemas
class ApprovalDecisionRequest(CamelModel):
    user_id: int
    approved: bool
    rejection_reason: Optional[str] = None


class ChangeRoleRequest(CamelModel):
    role: str = Field(..., min_length=1)


class AdminDashboardStats(CamelModel):
    total_users: int
    pending_approvals: int
    approved_users: int
    rejected_users: int
    students_count: int
    admins_count: int
    verified_emails: int
    unverified_emails: int


class UserApprovalResponse(CamelModel):
    """Account as shown to admins reviewing registrations."""

    id: int
    email: str
    email_verified: bool
    national_id: str
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    status: UserStatus
    role: UserRole
    year: int
    faculty_name: Optional[str] = None
    department_name: Optional[str] = None
    profile_photo_url: Optional[str] = None
    national_id_scan_url: Optional[str] = None
    registration_date: Optional[str] = None


class SendVerificationResponse(CamelModel):
    message: str
    token: Optional[str] = None
    user_id: Optional[int] = None
    info: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# Moderation Schemas
class AddBannedWordRequest(CamelModel):
    word: str = Field(..., max_length=constants.BANNED_WORD_MAX_LENGTH)


class BannedWordResponse(CamelModel):
    id: int
    word: str
    added_at: Optional[datetime] = None


class FlaggedContentResponse(CamelModel):
    id: int
    user_id: int
    user_email: str
    user_name: str
    content: str
    flagged_at: Optional[datetime] = None


# Profile Schemas
class UpdateProfileRequest(CamelModel):
    """
    Partial profile edit. Omitted (or null) fields are left unchanged.

    Empty strings are accepted for the pattern-checked fields and mean
    "leave unchanged" for national ID, phone and visibility.
    """

    first_name: Optional[str] = Field(None, max_length=constants.NAME_MAX_LENGTH)
    last_name: Optional[str] = Field(None, max_length=constants.NAME_MAX_LENGTH)
    national_id: Optional[str] = None
    faculty_id: Optional[int] = None
    department_id: Optional[int] = None
    year: Optional[int] = Field(None, ge=1)

    bio: Optional[str] = Field(None, max_length=constants.BIO_MAX_LENGTH)
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    interests: Optional[str] = Field(None, max_length=constants.INTERESTS_MAX_LENGTH)
    visibility: Optional[ProfileVisibility] = None

    @field_validator("national_id")
    @classmethod
    def national_id_digits(cls, v: Optional[str]) -> Optional[str]:
        v = _blank_to_none(v)
        if v is not None and not re.match(constants.NATIONAL_ID_PATTERN, v):
            raise ValueError("National ID must be exactly 14 digits")
        return v

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, v: Optional[str]) -> Optional[str]:
        v = _blank_to_none(v)
        if v is not None and not re.match(constants.PHONE_PATTERN, v):
            raise ValueError("Phone number must be between 10 and 20 digits")
        return v

    @field_validator("linkedin")
    @classmethod
    def linkedin_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not re.match(constants.LINKEDIN_PATTERN, v):
            raise ValueError("Invalid LinkedIn URL")
        return v

    @field_validator("github")
    @classmethod
    def github_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not re.match(constants.GITHUB_PATTERN, v):
            raise ValueError("Invalid GitHub URL")
        return v

    @field_validator("visibility", mode="before")
    @classmethod
    def visibility_upper(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


class UpdateVisibilityRequest(CamelModel):
    visibility: ProfileVisibility

    @field_validator("visibility", mode="before")
    @classmethod
    def visibility_upper(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ProfileResponse(CamelModel):
    id: int
    user_id: int
    email: str
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    profile_photo: Optional[str] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    interests: Optional[str] = None
    visibility: ProfileVisibility
    year: int
    faculty: Optional[str] = None
    department: Optional[str] = None
    role: UserRole
    status: UserStatus
    rejection_reason: Optional[str] = None
    national_id_scan: Optional[str] = None


class ProfilePhotoResponse(CamelModel):
    photo_url: str
    message: str


class NationalIdScanResponse(CamelModel):
    scan_url: str
    message: str


# Academic reference data
class FacultyResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    years_numbers: int


class DepartmentResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    faculty_id: int
