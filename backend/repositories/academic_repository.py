"""
Repositories for faculty and department reference data.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class FacultyRepository(BaseRepository[db_models.Faculty]):
    """Repository for Faculty lookups."""

    def __init__(self, db: Session):
        super().__init__(db_models.Faculty, db)

    def get_by_name(self, name: str) -> Optional[db_models.Faculty]:
        return self.find_one(db_models.Faculty.name == name)

    def list_all(self) -> List[db_models.Faculty]:
        return self.db.query(db_models.Faculty).order_by(db_models.Faculty.id).all()


class DepartmentRepository(BaseRepository[db_models.Department]):
    """Repository for Department lookups."""

    def __init__(self, db: Session):
        super().__init__(db_models.Department, db)

    def list_all(self, faculty_id: Optional[int] = None) -> List[db_models.Department]:
        """
        List departments, optionally restricted to one faculty.

        Args:
            faculty_id: Owning faculty to filter on

        Returns:
            Departments ordered by ID
        """
        query = self.db.query(db_models.Department)
        if faculty_id is not None:
            query = query.filter(db_models.Department.faculty_id == faculty_id)
        return query.order_by(db_models.Department.id).all()
