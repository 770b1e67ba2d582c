"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Enum columns are stored as their upper-case names in plain VARCHAR columns
(``native_enum=False``), so the stored text is the same on SQLite and
PostgreSQL.
"""

import enum
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpers.time_utils import utc_now
from repositories.database import Base


class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


class UserStatus(str, enum.Enum):
    """Approval lifecycle; a new account starts PENDING."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProfileVisibility(str, enum.Enum):
    """Who may read a profile once its owner is approved."""

    PUBLIC = "PUBLIC"  # Anyone, including anonymous callers
    STUDENTS_ONLY = "STUDENTS_ONLY"  # Any authenticated caller
    PRIVATE = "PRIVATE"  # Owner and admins only


def _enum_column(enum_cls: type[enum.Enum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        validate_strings=True,
        create_constraint=False,
    )


class Faculty(Base):
    __tablename__ = "faculties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    years_numbers: Mapped[int] = mapped_column(Integer, nullable=False)

    departments: Mapped[List["Department"]] = relationship(
        "Department", back_populates="faculty", order_by="Department.id"
    )


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = (
        UniqueConstraint("faculty_id", "name", name="uq_department_faculty_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    faculty_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("faculties.id"), nullable=False, index=True
    )

    faculty: Mapped["Faculty"] = relationship("Faculty", back_populates="departments")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_status_role", "status", "role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    national_id: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    # Set right after the row is flushed, once the scan is stored under the user id
    national_id_scan: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    role: Mapped[UserRole] = mapped_column(
        _enum_column(UserRole), default=UserRole.STUDENT, nullable=False
    )
    status: Mapped[UserStatus] = mapped_column(
        _enum_column(UserStatus), default=UserStatus.PENDING, nullable=False
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    email_verification_token: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )
    email_verification_sent_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    faculty_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("faculties.id"), nullable=False, index=True
    )
    department_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now
    )

    faculty: Mapped["Faculty"] = relationship("Faculty")
    department: Mapped["Department"] = relationship("Department")
    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    profile_photo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    linkedin: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    github: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    interests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    visibility: Mapped[ProfileVisibility] = mapped_column(
        _enum_column(ProfileVisibility),
        default=ProfileVisibility.PUBLIC,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")


class BannedWord(Base):
    __tablename__ = "banned_words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # Always stored lower-cased
    word: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    added_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)


class FlaggedContent(Base):
    """Append-only record of a rejected profile edit."""

    __tablename__ = "flagged_content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    flagged_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    user: Mapped["User"] = relationship("User")
