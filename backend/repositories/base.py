"""
Generic repository over one mapped model; concrete repositories add queries.
"""

from typing import Generic, TypeVar

from sqlalchemy import ColumnElement
from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Common CRUD operations over one SQLAlchemy model.

    ``add``/``flush`` leave the transaction open so a service can group
    several writes; ``create`` and ``delete`` commit immediately.
    """

    def __init__(self, model: type[T], db: Session):
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> T | None:
        """
        Get entity by primary key.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self.db.get(self.model, id)

    def find_one(self, *criteria: ColumnElement[bool]) -> T | None:
        """First row matching every criterion, or None."""
        return self.db.query(self.model).filter(*criteria).first()

    def exists(self, *criteria: ColumnElement[bool]) -> bool:
        return self.db.query(self.model.id).filter(*criteria).first() is not None

    def count(self) -> int:
        return self.db.query(self.model).count()

    def add(self, entity: T) -> None:
        """Add entity to the session without committing."""
        self.db.add(entity)

    def create(self, entity: T) -> T:
        """
        Insert an entity and commit.

        Args:
            entity: Entity to create

        Returns:
            Created entity, refreshed with generated columns
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        self.db.delete(entity)
        self.db.commit()

    def commit(self) -> None:
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes so generated IDs are assigned."""
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()
