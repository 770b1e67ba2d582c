import json
import os
import sys
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development reads `backend/.env` for convenience. Under pytest or
    in CI the file is ignored so tests see only the variables they set.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'test', 'staging' or 'production'",
    )

    DATABASE_URL: str = "sqlite:///./data/campuscard.db"
    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="JWT signing key - must be set via SECRET_KEY environment variable",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=24 * 60,
        description="Session token lifetime (24 hours by default)",
    )
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated or JSON list in env var)",
    )

    # Bootstrap admin account, created on startup when missing
    ADMIN_EMAIL: str = Field(
        ...,  # Required, no default
        description="Admin email - must be set via ADMIN_EMAIL environment variable",
    )
    ADMIN_PASSWORD: str = Field(
        ...,  # Required, no default
        description="Admin password - must be set via ADMIN_PASSWORD environment variable",
    )
    ADMIN_FIRST_NAME: str = "System"
    ADMIN_LAST_NAME: str = "Administrator"
    ADMIN_NATIONAL_ID: str = "00000000000000"
    ADMIN_FACULTY_ID: int = 1
    ADMIN_DEPARTMENT_ID: int = 1

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    AUTO_CREATE_DB: bool = Field(
        default=True,
        description="When true, call Base.metadata.create_all on startup",
    )

    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Registration rules
    ALLOWED_EMAIL_DOMAIN: str = Field(
        default="@eng.psu.edu.eg",
        description="Only addresses ending with this suffix may register",
    )

    # Rate limiting (login and signup endpoints)
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW_MINUTES: int = 15
    SIGNUP_RATE_LIMIT_ATTEMPTS: int = 3
    SIGNUP_RATE_LIMIT_WINDOW_MINUTES: int = 60

    # Object storage (S3-compatible, accessed through MinIO client)
    MINIO_ENDPOINT: str = Field(
        default="localhost:9000",
        description="host:port of the object storage API",
    )
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "campuscard"
    MINIO_SECURE: bool = False
    MINIO_PUBLIC_URL: str = Field(
        default="http://localhost:9000",
        description="Base URL used to build and parse stored object URLs",
    )
    MAX_UPLOAD_SIZE_MB: int = 10

    # Email verification
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = 24
    TESTING_MODE: bool = Field(
        default=True,
        description="Echo email verification tokens in API responses",
    )
    FRONTEND_URL: str = Field(
        default="http://localhost:3000",
        description="Frontend base URL used in email links",
    )

    # Email Provider Settings
    EMAIL_PROVIDER: str = Field(
        default="console",
        description="Email provider: 'smtp' or 'console'",
    )
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "noreply@campuscard.app"
    SMTP_FROM_NAME: str = "CampusCard"
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Use STARTTLS for SMTP connection (port 587)",
    )
    SMTP_USE_SSL: bool = Field(
        default=False,
        description="Use implicit SSL for SMTP connection (port 465)",
    )

    PROJECT_NAME: str = "CampusCard"

    @property
    def login_rate_limit(self) -> str:
        """slowapi limit string for the login endpoint."""
        return (
            f"{self.LOGIN_RATE_LIMIT_ATTEMPTS}/"
            f"{self.LOGIN_RATE_LIMIT_WINDOW_MINUTES} minutes"
        )

    @property
    def signup_rate_limit(self) -> str:
        """slowapi limit string for the signup endpoint."""
        return (
            f"{self.SIGNUP_RATE_LIMIT_ATTEMPTS}/"
            f"{self.SIGNUP_RATE_LIMIT_WINDOW_MINUTES} minutes"
        )

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from a comma-separated string or a JSON list."""
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError if SECRET_KEY or
# the admin credentials are missing.
settings = Settings()  # type: ignore[call-arg]
