"""
WellBloom Backend: Phrase Service
==================================

What:  Motivational phrases attached to emotions, including a random pick
       for "show me something encouraging for how I feel".
Who:   Called by routes/phrases.py.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.exceptions import NotFoundError, ValidationError
from wellbloom.models.emotion import Emotion, Phrase
from wellbloom.schemas.emotion import PhraseCreate, PhraseResponse, PhraseUpdate
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


class PhraseService:

    async def _load(self, db: AsyncSession, phrase_id: int) -> Optional[Phrase]:
        stmt = (
            select(Phrase)
            .options(joinedload(Phrase.emotion))
            .where(Phrase.id == phrase_id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one_or_none()

    async def _require_emotion(self, db: AsyncSession, emotion_id: int) -> None:
        if await db.get(Emotion, emotion_id) is None:
            raise ValidationError(message="Emotion does not exist", field="emotion_id")

    @staticmethod
    def _to_response(phrase: Phrase) -> PhraseResponse:
        return PhraseResponse(
            id=phrase.id,
            text=phrase.text,
            author=phrase.author,
            emotion_id=phrase.emotion_id,
            emotion_name=phrase.emotion.name,
        )

    def _base_query(self):
        return select(Phrase).options(joinedload(Phrase.emotion))

    @storage_guard("list phrases")
    async def list_phrases(self, db: AsyncSession) -> List[PhraseResponse]:
        result = await db.execute(self._base_query().order_by(Phrase.id))
        return [self._to_response(p) for p in result.scalars().all()]

    @storage_guard("search phrases")
    async def search_phrases(self, db: AsyncSession, text: str) -> List[PhraseResponse]:
        """Case-insensitive substring match over text and author."""
        stmt = (
            self._base_query()
            .where(
                or_(
                    Phrase.text.icontains(text, autoescape=True),
                    Phrase.author.icontains(text, autoescape=True),
                )
            )
            .order_by(Phrase.id)
        )
        result = await db.execute(stmt)
        return [self._to_response(p) for p in result.scalars().all()]

    @storage_guard("list phrases by emotion")
    async def list_by_emotion(self, db: AsyncSession, emotion_id: int) -> List[PhraseResponse]:
        stmt = self._base_query().where(Phrase.emotion_id == emotion_id).order_by(Phrase.id)
        result = await db.execute(stmt)
        return [self._to_response(p) for p in result.scalars().all()]

    @storage_guard("random phrase by emotion")
    async def random_by_emotion(self, db: AsyncSession, emotion_id: int) -> PhraseResponse:
        """
        One phrase of the emotion, picked by the database (ORDER BY random()).

        Raises:
            NotFoundError: The emotion has no phrases, or does not exist (404)
        """
        stmt = (
            self._base_query()
            .where(Phrase.emotion_id == emotion_id)
            .order_by(func.random())
            .limit(1)
        )
        phrase = (await db.execute(stmt)).scalar_one_or_none()
        if phrase is None:
            raise NotFoundError(
                resource="Phrase",
                message=f"No phrases found for emotion with ID '{emotion_id}'",
                context={"emotion_id": emotion_id},
            )
        return self._to_response(phrase)

    @storage_guard("create phrase")
    async def create_phrase(self, db: AsyncSession, data: PhraseCreate) -> PhraseResponse:
        """Create a phrase; ValidationError on emotion_id when the emotion is missing."""
        await self._require_emotion(db, data.emotion_id)

        phrase = Phrase(**data.model_dump())
        db.add(phrase)
        await db.flush()
        logger.info("Phrase created: id=%d emotion_id=%d", phrase.id, data.emotion_id)
        return self._to_response(await self._load(db, phrase.id))

    @storage_guard("update phrase")
    async def update_phrase(
        self, db: AsyncSession, phrase_id: int, data: PhraseUpdate
    ) -> PhraseResponse:
        phrase = await db.get(Phrase, phrase_id)
        if phrase is None:
            raise NotFoundError(resource="Phrase", resource_id=phrase_id)

        changes = data.changes()
        if "emotion_id" in changes and changes["emotion_id"] != phrase.emotion_id:
            await self._require_emotion(db, changes["emotion_id"])

        for field, value in changes.items():
            setattr(phrase, field, value)
        await db.flush()
        return self._to_response(await self._load(db, phrase_id))

    @storage_guard("delete phrase")
    async def delete_phrase(self, db: AsyncSession, phrase_id: int) -> None:
        """Delete a single phrase. Raises NotFoundError (404) when absent."""
        phrase = await db.get(Phrase, phrase_id)
        if phrase is None:
            raise NotFoundError(resource="Phrase", resource_id=phrase_id)
        await db.delete(phrase)
        await db.flush()


# Module-level singleton
phrase_service = PhraseService()
