"""
User repository for database operations.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        return self.find_one(db_models.User.email == email)

    def get_by_national_id(self, national_id: str) -> Optional[db_models.User]:
        """
        Get user by national ID.

        Args:
            national_id: 14-digit national ID

        Returns:
            User if found, None otherwise
        """
        return self.find_one(db_models.User.national_id == national_id)

    def email_exists(self, email: str) -> bool:
        return self.exists(db_models.User.email == email)

    def national_id_exists(
        self, national_id: str, exclude_user_id: Optional[int] = None
    ) -> bool:
        """
        Check whether a national ID is already registered.

        Args:
            national_id: National ID to check
            exclude_user_id: Ignore this user (the one being edited)

        Returns:
            True if another user holds the national ID
        """
        criteria = [db_models.User.national_id == national_id]
        if exclude_user_id is not None:
            criteria.append(db_models.User.id != exclude_user_id)
        return self.exists(*criteria)

    def get_with_academics(self, user_id: int) -> Optional[db_models.User]:
        """Get a user with faculty, department and profile eagerly loaded."""
        return (
            self.db.query(db_models.User)
            .options(
                joinedload(db_models.User.faculty),
                joinedload(db_models.User.department),
                joinedload(db_models.User.profile),
            )
            .filter(db_models.User.id == user_id)
            .first()
        )

    def get_all_users(self) -> List[db_models.User]:
        """All users, oldest registration first."""
        return (
            self.db.query(db_models.User)
            .options(
                joinedload(db_models.User.faculty),
                joinedload(db_models.User.department),
                joinedload(db_models.User.profile),
            )
            .order_by(db_models.User.created_at, db_models.User.id)
            .all()
        )

    def get_by_status(self, status: db_models.UserStatus) -> List[db_models.User]:
        """
        Get users in a given approval state, oldest registration first.

        Args:
            status: Approval status to filter on

        Returns:
            List of users
        """
        return (
            self.db.query(db_models.User)
            .options(
                joinedload(db_models.User.faculty),
                joinedload(db_models.User.department),
                joinedload(db_models.User.profile),
            )
            .filter(db_models.User.status == status)
            .order_by(db_models.User.created_at, db_models.User.id)
            .all()
        )

    def count_by_status(self) -> dict[db_models.UserStatus, int]:
        rows = (
            self.db.query(db_models.User.status, func.count(db_models.User.id))
            .group_by(db_models.User.status)
            .all()
        )
        return {status: count for status, count in rows}

    def count_by_role(self) -> dict[db_models.UserRole, int]:
        rows = (
            self.db.query(db_models.User.role, func.count(db_models.User.id))
            .group_by(db_models.User.role)
            .all()
        )
        return {role: count for role, count in rows}

    def count_verified(self, verified: bool) -> int:
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.email_verified == verified)
            .count()
        )

    def get_for_update(self, user_id: int) -> Optional[db_models.User]:
        """
        Load a user with a row lock held until the transaction ends.

        Lifecycle transitions read through this so their guards see the
        latest committed state.
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.id == user_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
