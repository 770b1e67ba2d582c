"""Unauthenticated reference data used by the sign-up form."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import AcademicService

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/faculties", response_model=List[schemas.FacultyResponse])
def list_faculties(db: Session = Depends(get_db)) -> List[db_models.Faculty]:
    return AcademicService.list_faculties(db)


@router.get("/departments", response_model=List[schemas.DepartmentResponse])
def list_departments(
    faculty_id: Optional[int] = Query(None, alias="facultyId"),
    db: Session = Depends(get_db),
) -> List[db_models.Department]:
    return AcademicService.list_departments(db, faculty_id)
