"""
Banned word repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class BannedWordRepository(BaseRepository[db_models.BannedWord]):
    """Repository for the moderation dictionary."""

    def __init__(self, db: Session):
        super().__init__(db_models.BannedWord, db)

    def get_by_word(self, word: str) -> Optional[db_models.BannedWord]:
        """
        Look up a dictionary entry.

        Args:
            word: Lower-cased word

        Returns:
            BannedWord if present, None otherwise
        """
        return self.find_one(db_models.BannedWord.word == word)

    def list_ordered(self) -> List[db_models.BannedWord]:
        return (
            self.db.query(db_models.BannedWord)
            .order_by(db_models.BannedWord.word)
            .all()
        )

    def all_words(self) -> List[str]:
        return [row.word for row in self.db.query(db_models.BannedWord.word).all()]
