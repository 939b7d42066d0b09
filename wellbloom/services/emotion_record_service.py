"""
WellBloom Backend: Emotion Record Service
==========================================

What:  Capture events: "user U felt emotion E at time T".
Who:   Called by routes/emotion_records.py.

Rules:
    - user and emotion must exist (NotFoundError, 404)
    - captured_at is assigned at insert time
    - a record annotated by journal entries cannot be deleted
      (DependencyConflictError)

Statistics (stats_by_user):
    One row per emotion the user logged: times logged and average score,
    most frequent first (ties broken by emotion id).
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.exceptions import DependencyConflictError, NotFoundError
from wellbloom.models.emotion import Emotion, EmotionRecord
from wellbloom.models.journal import JournalEntry
from wellbloom.models.user import User
from wellbloom.schemas.common import OffsetPage, OffsetPagination
from wellbloom.schemas.emotion import EmotionRecordCreate, EmotionRecordResponse, EmotionStat
from wellbloom.services.base import storage_guard
from wellbloom.services.query import Criteria, Page, fetch_page

logger = logging.getLogger(__name__)


class EmotionRecordService:

    def _base_query(self):
        return (
            select(EmotionRecord)
            .options(joinedload(EmotionRecord.user), joinedload(EmotionRecord.emotion))
            .order_by(EmotionRecord.captured_at.desc(), EmotionRecord.id.desc())
        )

    async def _load(self, db: AsyncSession, record_id: int) -> Optional[EmotionRecord]:
        stmt = (
            self._base_query()
            .where(EmotionRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one_or_none()

    @staticmethod
    def _to_response(record: EmotionRecord) -> EmotionRecordResponse:
        return EmotionRecordResponse(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user.name,
            emotion_id=record.emotion_id,
            emotion_name=record.emotion.name,
            captured_at=record.captured_at,
        )

    @storage_guard("list emotion records")
    async def list_records(self, db: AsyncSession) -> List[EmotionRecordResponse]:
        result = await db.execute(self._base_query())
        return [self._to_response(r) for r in result.scalars().all()]

    @storage_guard("create emotion record")
    async def create_record(
        self, db: AsyncSession, data: EmotionRecordCreate
    ) -> EmotionRecordResponse:
        """
        Log that a user felt an emotion now.

        What:    captured_at is set by the server, never by the client.
        Who:     Called by POST /api/emotion-records.

        Returns:
            The record re-read with user and emotion names

        Raises:
            NotFoundError: The user or the emotion does not exist (404)
        """
        if await db.get(User, data.user_id) is None:
            raise NotFoundError(resource="User", resource_id=data.user_id)
        if await db.get(Emotion, data.emotion_id) is None:
            raise NotFoundError(resource="Emotion", resource_id=data.emotion_id)

        record = EmotionRecord(user_id=data.user_id, emotion_id=data.emotion_id)
        db.add(record)
        await db.flush()
        logger.info(
            "Emotion record created: id=%d user_id=%d emotion_id=%d",
            record.id, data.user_id, data.emotion_id,
        )
        return self._to_response(await self._load(db, record.id))

    @storage_guard("list emotion records by user")
    async def list_by_user(
        self, db: AsyncSession, user_id: int, page: Page
    ) -> OffsetPage[EmotionRecordResponse]:
        rows, total = await fetch_page(
            db,
            self._base_query(),
            Criteria(EmotionRecord.user_id == user_id),
            page,
            count_from=EmotionRecord,
        )
        return OffsetPage[EmotionRecordResponse](
            data=[self._to_response(r) for r in rows],
            pagination=OffsetPagination(total=total, limit=page.limit, offset=page.offset),
        )

    @storage_guard("delete emotion record")
    async def delete_record(self, db: AsyncSession, record_id: int) -> None:
        """
        Hard delete a record no journal entry annotates.

        Raises:
            NotFoundError: No such record (404)
            DependencyConflictError: Journal entries reference it (400)
        """
        record = await db.get(EmotionRecord, record_id)
        if record is None:
            raise NotFoundError(resource="Emotion record", resource_id=record_id)

        n_entries = (
            await db.execute(
                select(func.count(JournalEntry.id)).where(JournalEntry.record_id == record_id)
            )
        ).scalar_one()
        if n_entries:
            raise DependencyConflictError(
                message=(
                    f"Cannot delete the emotion record: {n_entries} journal entr"
                    f"{'y' if n_entries == 1 else 'ies'} reference it"
                ),
                dependents=["journal_entries"],
                context={"record_id": record_id},
            )

        await db.delete(record)
        await db.flush()
        logger.info("Emotion record deleted: id=%d", record_id)

    @storage_guard("emotion stats by user")
    async def stats_by_user(self, db: AsyncSession, user_id: int) -> List[EmotionStat]:
        """
        Per-emotion totals for one user, most frequent first.

        Query plan:
            SELECT emotion, count(*), avg(score) FROM emotion_records JOIN emotions
            WHERE user_id = :id GROUP BY emotion ORDER BY count DESC, emotion id

        An unknown user yields an empty list.
        """
        total = func.count(EmotionRecord.id).label("total")
        stmt = (
            select(Emotion.id, Emotion.name, total, func.avg(Emotion.score).label("average_score"))
            .join(EmotionRecord, EmotionRecord.emotion_id == Emotion.id)
            .where(EmotionRecord.user_id == user_id)
            .group_by(Emotion.id, Emotion.name)
            .order_by(total.desc(), Emotion.id)
        )
        result = await db.execute(stmt)
        return [
            EmotionStat(
                emotion_id=row.id,
                emotion_name=row.name,
                total=row.total,
                average_score=float(row.average_score) if row.average_score is not None else None,
            )
            for row in result.all()
        ]


# Module-level singleton
emotion_record_service = EmotionRecordService()
