"""Sign-up and login endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

import models.schemas as schemas
from helpers.rate_limiter import limiter
from models.config import settings
from repositories.database import get_db
from services.auth_service import AuthService
from services.registration_service import RegistrationService
from services.storage_service import StorageService, get_storage_service

router = APIRouter(tags=["auth"])


def signup_form(
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    date_of_birth: Optional[str] = Form(None, alias="dateOfBirth"),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    national_id: Optional[str] = Form(None, alias="nationalId"),
    year: Optional[str] = Form(None),
    faculty_id: Optional[str] = Form(None, alias="facultyId"),
    department_id: Optional[str] = Form(None, alias="departmentId"),
) -> schemas.SignupRequest:
    """
    Collect the multipart text fields into a SignupRequest.

    Fields are read as raw strings so every problem, including missing
    fields, is reported through the same validation error map.
    """
    raw = {
        "firstName": first_name,
        "lastName": last_name,
        "dateOfBirth": date_of_birth,
        "email": email,
        "password": password,
        "nationalId": national_id,
        "year": year,
        "facultyId": faculty_id,
        "departmentId": department_id,
    }
    try:
        return schemas.SignupRequest.model_validate(
            {k: v for k, v in raw.items() if v is not None}
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post(
    "/signup",
    response_model=schemas.SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.signup_rate_limit)
def signup(
    request: Request,
    data: schemas.SignupRequest = Depends(signup_form),
    national_id_scan: Optional[UploadFile] = File(None, alias="nationalIdScan"),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> schemas.SignupResponse:
    """
    Register a new student (multipart form with the national ID scan).

    The account starts PENDING and must be verified and approved by an admin.
    """
    if national_id_scan is None:
        raise RequestValidationError(
            [
                {
                    "type": "missing",
                    "loc": ("body", "nationalIdScan"),
                    "msg": "National ID scan is required",
                    "input": None,
                }
            ]
        )
    return RegistrationService.register(db, data, national_id_scan, storage)


@router.post("/login", response_model=schemas.LoginResponse)
@limiter.limit(settings.login_rate_limit)
def login(
    request: Request,
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> schemas.LoginResponse:
    """
    Log in with an email or national ID.

    Login succeeds in every approval state; the response carries the status.
    """
    return AuthService.login(db, credentials.identifier, credentials.password)
