"""
WellBloom Backend: Emotion Service
===================================

What:  The emotion catalogue users pick from when logging how they feel.
Who:   Called by routes/emotions.py.

Rules:
    - name is unique: create and rename answer ConflictError (409)
    - an emotion referenced by any emotion record cannot be deleted
      (DependencyConflictError); its phrases are deleted with it

Pagination:
    The catalogue is browsed by page number, so list_emotions() returns the
    NumberedPage envelope ({total, page, limit, total_pages}).
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wellbloom.exceptions import ConflictError, DependencyConflictError, NotFoundError
from wellbloom.models.emotion import Emotion, EmotionRecord
from wellbloom.schemas.common import NumberedPage, NumberedPagination
from wellbloom.schemas.emotion import (
    EmotionCreate,
    EmotionResponse,
    EmotionUpdate,
    PhraseResponse,
)
from wellbloom.services.base import storage_guard
from wellbloom.services.query import Criteria, Page, fetch_page

logger = logging.getLogger(__name__)


class EmotionService:

    async def _get_or_404(self, db: AsyncSession, emotion_id: int) -> Emotion:
        emotion = await db.get(Emotion, emotion_id)
        if emotion is None:
            raise NotFoundError(resource="Emotion", resource_id=emotion_id)
        return emotion

    async def _ensure_name_free(
        self, db: AsyncSession, name: str, exclude_id: Optional[int] = None
    ) -> None:
        stmt = select(Emotion.id).where(Emotion.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Emotion.id != exclude_id)
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(
                message=f"An emotion named '{name}' already exists",
                context={"name": name},
            )

    @storage_guard("list emotions")
    async def list_emotions(self, db: AsyncSession, page: Page) -> NumberedPage[EmotionResponse]:
        """Emotions in id order, one numbered page at a time."""
        rows, total = await fetch_page(
            db,
            select(Emotion).order_by(Emotion.id),
            Criteria(),
            page,
            count_from=Emotion,
        )
        return NumberedPage[EmotionResponse](
            data=[EmotionResponse.model_validate(e) for e in rows],
            pagination=NumberedPagination(
                total=total,
                page=page.number or 1,
                limit=page.limit,
                total_pages=page.total_pages(total),
            ),
        )

    @storage_guard("get emotion")
    async def get_emotion(self, db: AsyncSession, emotion_id: int) -> EmotionResponse:
        return EmotionResponse.model_validate(await self._get_or_404(db, emotion_id))

    @storage_guard("create emotion")
    async def create_emotion(self, db: AsyncSession, data: EmotionCreate) -> EmotionResponse:
        """
        Create an emotion with a unique name.

        Raises:
            ConflictError: Another emotion already has this name (409); the
                emotion count is unchanged
        """
        await self._ensure_name_free(db, data.name)

        emotion = Emotion(**data.model_dump())
        db.add(emotion)
        await db.flush()
        await db.refresh(emotion)
        logger.info("Emotion created: id=%d name=%s", emotion.id, emotion.name)
        return EmotionResponse.model_validate(emotion)

    @storage_guard("update emotion")
    async def update_emotion(
        self, db: AsyncSession, emotion_id: int, data: EmotionUpdate
    ) -> EmotionResponse:
        emotion = await self._get_or_404(db, emotion_id)
        changes = data.changes()
        if "name" in changes and changes["name"] != emotion.name:
            await self._ensure_name_free(db, changes["name"], exclude_id=emotion_id)

        for field, value in changes.items():
            setattr(emotion, field, value)
        await db.flush()
        await db.refresh(emotion)
        return EmotionResponse.model_validate(emotion)

    @storage_guard("delete emotion")
    async def delete_emotion(self, db: AsyncSession, emotion_id: int) -> None:
        """
        Delete an emotion together with its phrases.

        What:    Emotion records are history and block the delete; phrases
                 only describe the emotion and go with it.
        Who:     Called by DELETE /api/emotions/{id}.

        Args:
            db: Request session
            emotion_id: Emotion to delete

        Raises:
            NotFoundError: No such emotion (404)
            DependencyConflictError: Emotion records reference it (400)
        """
        stmt = (
            select(Emotion)
            .options(selectinload(Emotion.phrases))
            .where(Emotion.id == emotion_id)
            .execution_options(populate_existing=True)
        )
        emotion = (await db.execute(stmt)).scalar_one_or_none()
        if emotion is None:
            raise NotFoundError(resource="Emotion", resource_id=emotion_id)

        n_records = (
            await db.execute(
                select(func.count(EmotionRecord.id)).where(EmotionRecord.emotion_id == emotion_id)
            )
        ).scalar_one()
        if n_records:
            raise DependencyConflictError(
                message=(
                    f"Cannot delete the emotion: {n_records} emotion record(s) reference it"
                ),
                dependents=["emotion_records"],
                context={"emotion_id": emotion_id, "record_count": n_records},
            )

        await db.delete(emotion)
        await db.flush()
        logger.info("Emotion deleted: id=%d", emotion_id)

    @storage_guard("list emotion phrases")
    async def list_phrases(self, db: AsyncSession, emotion_id: int) -> List[PhraseResponse]:
        """Phrases of an existing emotion; an empty list is a valid answer."""
        stmt = (
            select(Emotion)
            .options(selectinload(Emotion.phrases))
            .where(Emotion.id == emotion_id)
            .execution_options(populate_existing=True)
        )
        emotion = (await db.execute(stmt)).scalar_one_or_none()
        if emotion is None:
            raise NotFoundError(resource="Emotion", resource_id=emotion_id)

        return [
            PhraseResponse(
                id=p.id,
                text=p.text,
                author=p.author,
                emotion_id=emotion.id,
                emotion_name=emotion.name,
            )
            for p in sorted(emotion.phrases, key=lambda p: p.id)
        ]


# Module-level singleton
emotion_service = EmotionService()
