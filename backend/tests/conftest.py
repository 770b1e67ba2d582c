"""
Pytest configuration and fixtures for backend tests.
"""

import io
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ADMIN_EMAIL"] = "admin@eng.psu.edu.eg"
os.environ["ADMIN_PASSWORD"] = "TestAdmin123!"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["TESTING_MODE"] = "true"

from authentication.auth import create_user_token, get_password_hash  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402
from services.email_service import EmailProvider, EmailService, get_email_service  # noqa: E402
from services.storage_service import StorageService, get_storage_service  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_BUCKET = "campuscard-test"
STUDENT_PASSWORD = "Password123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class RecordingEmailProvider(EmailProvider):
    """Keeps every message in memory instead of delivering it."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[dict] = []

    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        self.sent.append(
            {"to": to_email, "subject": subject, "html": html_body, "text": text_body}
        )
        return self.succeed


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def mailer(email_provider) -> EmailService:
    return EmailService(provider=email_provider)


@pytest.fixture
def storage() -> StorageService:
    """Storage service backed by a mocked MinIO client."""
    return StorageService(client=MagicMock(), bucket=TEST_BUCKET)


@pytest.fixture
def make_upload():
    """Factory for in-memory uploaded files."""

    def _make_upload(
        content: bytes = PNG_BYTES,
        filename: str = "scan.png",
        content_type: str = "image/png",
    ) -> UploadFile:
        return UploadFile(
            file=io.BytesIO(content),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make_upload


@pytest.fixture(scope="function")
def client(db_session, storage, mailer):
    """Create a test client with overridden database, storage and email."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_email_service] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def faculty(db_session) -> db_models.Faculty:
    """Create a five-year faculty."""
    faculty = db_models.Faculty(
        name="Faculty of Engineering",
        description="Engineering programmes",
        years_numbers=5,
    )
    db_session.add(faculty)
    db_session.commit()
    db_session.refresh(faculty)
    return faculty


@pytest.fixture
def department(db_session, faculty) -> db_models.Department:
    """Create a department inside ``faculty``."""
    department = db_models.Department(
        name="Computer and Control Engineering",
        description="Computer systems and control",
        faculty_id=faculty.id,
    )
    db_session.add(department)
    db_session.commit()
    db_session.refresh(department)
    return department


@pytest.fixture
def other_department(db_session) -> db_models.Department:
    """Create a department that belongs to a different faculty."""
    science = db_models.Faculty(name="Faculty of Science", years_numbers=4)
    science.departments = [db_models.Department(name="Physics")]
    db_session.add(science)
    db_session.commit()
    db_session.refresh(science)
    return science.departments[0]


@pytest.fixture
def make_user(db_session, faculty, department):
    """Factory fixture creating a user with a profile."""

    def _make_user(
        email: str,
        national_id: str,
        role: db_models.UserRole = db_models.UserRole.STUDENT,
        status: db_models.UserStatus = db_models.UserStatus.APPROVED,
        email_verified: bool = True,
        visibility: db_models.ProfileVisibility = db_models.ProfileVisibility.PUBLIC,
        first_name: str = "Test",
        last_name: str = "Student",
    ) -> db_models.User:
        user = db_models.User(
            email=email,
            hashed_password=get_password_hash(STUDENT_PASSWORD),
            first_name=first_name,
            last_name=last_name,
            national_id=national_id,
            national_id_scan=f"http://localhost:9000/{TEST_BUCKET}/scan.png",
            role=role,
            status=status,
            email_verified=email_verified,
            year=2,
            faculty_id=faculty.id,
            department_id=department.id,
        )
        user.profile = db_models.Profile(visibility=visibility)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def student(make_user) -> db_models.User:
    """An approved student with a public profile."""
    return make_user(
        "student@eng.psu.edu.eg",
        "29901011234567",
        first_name="Alice",
        last_name="Hassan",
    )


@pytest.fixture
def pending_student(make_user) -> db_models.User:
    """A freshly registered student: pending and unverified."""
    return make_user(
        "pending@eng.psu.edu.eg",
        "30001011234567",
        status=db_models.UserStatus.PENDING,
        email_verified=False,
        first_name="Omar",
        last_name="Salem",
    )


@pytest.fixture
def admin_user(make_user) -> db_models.User:
    """An administrator with a private profile."""
    return make_user(
        "admin@eng.psu.edu.eg",
        "00000000000000",
        role=db_models.UserRole.ADMIN,
        visibility=db_models.ProfileVisibility.PRIVATE,
        first_name="System",
        last_name="Administrator",
    )


@pytest.fixture
def auth_headers(student) -> dict:
    """Get authentication headers for the approved student."""
    return {"Authorization": f"Bearer {create_user_token(student)}"}


@pytest.fixture
def pending_auth_headers(pending_student) -> dict:
    return {"Authorization": f"Bearer {create_user_token(pending_student)}"}


@pytest.fixture
def admin_auth_headers(admin_user) -> dict:
    """Get authentication headers for admin user."""
    return {"Authorization": f"Bearer {create_user_token(admin_user)}"}
