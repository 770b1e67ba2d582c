"""
Content moderation: banned-word dictionary and flagged-content audit trail.

Matching is a case-insensitive substring scan over the whole dictionary.
"""

from typing import Mapping, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.constants import FLAGGED_CONTENT_MAX_LENGTH, MSG_BANNED_WORD_EMPTY
from models.exceptions import (
    DuplicateResourceException,
    InvalidStateException,
    ResourceNotFoundException,
)
from repositories.banned_word_repository import BannedWordRepository
from repositories.flagged_content_repository import FlaggedContentRepository


class ContentModerationService:
    """Service for banned-word checks and moderation administration."""

    @staticmethod
    def check_for_banned_words(db: Session, text: Optional[str]) -> list[str]:
        """
        Return every dictionary word that occurs in ``text``.

        Args:
            db: Database session
            text: Free text to scan; None or blank is always clean

        Returns:
            Matched words in dictionary order
        """
        if not text or not text.strip():
            return []
        lowered = text.lower()
        words = BannedWordRepository(db).all_words()
        return [word for word in sorted(words) if word in lowered]

    @staticmethod
    def contains_banned_words(db: Session, text: Optional[str]) -> bool:
        return bool(ContentModerationService.check_for_banned_words(db, text))

    @staticmethod
    def validate_fields(
        db: Session, fields: Mapping[str, Optional[str]]
    ) -> dict[str, list[str]]:
        """
        Check several named fields at once.

        Returns:
            Only the fields with violations, mapped to their matched words
        """
        words = sorted(BannedWordRepository(db).all_words())
        violations: dict[str, list[str]] = {}
        for field, text in fields.items():
            if not text or not text.strip():
                continue
            lowered = text.lower()
            matched = [word for word in words if word in lowered]
            if matched:
                violations[field] = matched
        return violations

    @staticmethod
    def log_violation(
        db: Session, user_id: int, field: str, content: str, words: list[str]
    ) -> None:
        """
        Write a FlaggedContent row for a rejected edit.

        Best-effort: a failed write is logged and the caller carries on.
        """
        snippet = content[:FLAGGED_CONTENT_MAX_LENGTH]
        record = db_models.FlaggedContent(
            user_id=user_id,
            content=(
                f"[Field: {field}] Banned words detected: {', '.join(words)} "
                f"| Content: {snippet}"
            ),
        )
        repo = FlaggedContentRepository(db)
        try:
            repo.create(record)
        except SQLAlchemyError as e:
            repo.rollback()
            logger.error(f"Failed to record flagged content for user {user_id}: {e}")
            return
        logger.warning(f"Flagged content in field '{field}' for user {user_id}")

    # Dictionary administration

    @staticmethod
    def add_banned_word(db: Session, word: str) -> db_models.BannedWord:
        """
        Add a word to the dictionary (trimmed, lower-cased).

        Raises:
            InvalidStateException: If the word is blank
            DuplicateResourceException: If the word is already listed
        """
        normalized = (word or "").strip().lower()
        if not normalized:
            raise InvalidStateException(MSG_BANNED_WORD_EMPTY)

        repo = BannedWordRepository(db)
        if repo.get_by_word(normalized):
            raise DuplicateResourceException("BannedWord", "word", normalized)

        banned = repo.create(db_models.BannedWord(word=normalized))
        logger.info(f"Banned word added: id={banned.id}")
        return banned

    @staticmethod
    def list_banned_words(db: Session) -> list[db_models.BannedWord]:
        return BannedWordRepository(db).list_ordered()

    @staticmethod
    def remove_banned_word(db: Session, word_id: int) -> None:
        """
        Delete a dictionary entry.

        Raises:
            ResourceNotFoundException: If no entry has this id
        """
        repo = BannedWordRepository(db)
        banned = repo.get_by_id(word_id)
        if banned is None:
            raise ResourceNotFoundException("BannedWord", "id", word_id)
        repo.delete(banned)
        logger.info(f"Banned word removed: id={word_id}")

    @staticmethod
    def list_flagged_content(db: Session) -> list[schemas.FlaggedContentResponse]:
        """Audit rows, newest first, with the offending user's identity."""
        return [
            schemas.FlaggedContentResponse(
                id=row.id,
                user_id=row.user_id,
                user_email=row.user.email,
                user_name=row.user.full_name,
                content=row.content,
                flagged_at=row.flagged_at,
            )
            for row in FlaggedContentRepository(db).list_newest_first()
        ]
