"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .academic_service import AcademicService
from .admin_service import AdminService
from .auth_service import AuthService
from .email_service import EmailService
from .moderation_service import ContentModerationService
from .profile_service import ProfileService
from .registration_service import RegistrationService
from .storage_service import StorageService

__all__ = [
    "AcademicService",
    "AdminService",
    "AuthService",
    "ContentModerationService",
    "EmailService",
    "ProfileService",
    "RegistrationService",
    "StorageService",
]
