"""
Flagged content repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class FlaggedContentRepository(BaseRepository[db_models.FlaggedContent]):
    """Repository for moderation audit rows."""

    def __init__(self, db: Session):
        super().__init__(db_models.FlaggedContent, db)

    def list_newest_first(self) -> List[db_models.FlaggedContent]:
        return (
            self.db.query(db_models.FlaggedContent)
            .options(joinedload(db_models.FlaggedContent.user))
            .order_by(
                db_models.FlaggedContent.flagged_at.desc(),
                db_models.FlaggedContent.id.desc(),
            )
            .all()
        )

    def list_for_user(self, user_id: int) -> List[db_models.FlaggedContent]:
        return (
            self.db.query(db_models.FlaggedContent)
            .filter(db_models.FlaggedContent.user_id == user_id)
            .order_by(db_models.FlaggedContent.id)
            .all()
        )
