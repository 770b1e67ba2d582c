"""
Profile repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class ProfileRepository(BaseRepository[db_models.Profile]):
    """Repository for Profile entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Profile, db)

    def get_by_user_id(self, user_id: int) -> Optional[db_models.Profile]:
        """
        Get the profile owned by a user.

        Args:
            user_id: Owning user ID

        Returns:
            Profile if found, None otherwise
        """
        return self.find_one(db_models.Profile.user_id == user_id)

    def get_public_approved_students(self) -> List[db_models.Profile]:
        """
        Profiles shown in the public directory.

        Only approved students whose visibility is PUBLIC are returned.
        """
        return (
            self.db.query(db_models.Profile)
            .join(db_models.Profile.user)
            .options(
                joinedload(db_models.Profile.user).joinedload(db_models.User.faculty),
                joinedload(db_models.Profile.user).joinedload(
                    db_models.User.department
                ),
            )
            .filter(
                db_models.User.status == db_models.UserStatus.APPROVED,
                db_models.User.role == db_models.UserRole.STUDENT,
                db_models.Profile.visibility == db_models.ProfileVisibility.PUBLIC,
            )
            .order_by(db_models.User.last_name, db_models.User.first_name)
            .all()
        )
