"""
Faculty and department reference data.
"""

from typing import Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.constants import MSG_DEPARTMENT_FACULTY_MISMATCH, MSG_INVALID_YEAR
from models.exceptions import InvalidStateException, ResourceNotFoundException
from repositories.academic_repository import DepartmentRepository, FacultyRepository


class AcademicService:
    """Lookups and placement checks for faculties and departments."""

    @staticmethod
    def list_faculties(db: Session) -> list[db_models.Faculty]:
        return FacultyRepository(db).list_all()

    @staticmethod
    def list_departments(
        db: Session, faculty_id: Optional[int] = None
    ) -> list[db_models.Department]:
        return DepartmentRepository(db).list_all(faculty_id)

    @staticmethod
    def resolve_placement(
        db: Session, faculty_id: int, department_id: int, year: int
    ) -> tuple[db_models.Faculty, db_models.Department]:
        """
        Validate a faculty / department / year combination.

        Args:
            db: Database session
            faculty_id: Chosen faculty
            department_id: Chosen department
            year: Academic year

        Returns:
            The faculty and department rows

        Raises:
            ResourceNotFoundException: If the faculty or department is unknown
            InvalidStateException: If the department belongs to another faculty
                or the year is outside ``1..faculty.years_numbers``
        """
        faculty = FacultyRepository(db).get_by_id(faculty_id)
        if faculty is None:
            raise ResourceNotFoundException("Faculty", "id", faculty_id)

        department = DepartmentRepository(db).get_by_id(department_id)
        if department is None:
            raise ResourceNotFoundException("Department", "id", department_id)

        if department.faculty_id != faculty.id:
            raise InvalidStateException(MSG_DEPARTMENT_FACULTY_MISMATCH)

        if year < 1 or year > faculty.years_numbers:
            raise InvalidStateException(MSG_INVALID_YEAR)

        return faculty, department
