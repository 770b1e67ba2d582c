"""
Repository pattern implementation for data access layer.
"""

from .academic_repository import DepartmentRepository, FacultyRepository
from .banned_word_repository import BannedWordRepository
from .base import BaseRepository
from .flagged_content_repository import FlaggedContentRepository
from .profile_repository import ProfileRepository
from .user_repository import UserRepository

__all__ = [
    "BannedWordRepository",
    "BaseRepository",
    "DepartmentRepository",
    "FacultyRepository",
    "FlaggedContentRepository",
    "ProfileRepository",
    "UserRepository",
]
