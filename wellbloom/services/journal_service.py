"""
WellBloom Backend: Journal (Bitácora) Service
==============================================

What:  Notes users attach to their own emotion records, plus the emotional
       summary of a trailing time window.
Who:   Called by routes/journal.py.

Create flow:
    1. Collect every missing reference (user_id, record_id) into a single
       ValidationError, so the client sees all problems at once
    2. Ownership: record.user_id must equal user_id, otherwise
       OwnershipError (403) and nothing is written
    3. Insert, then re-read joined with user, record and emotion

Summary (summary_by_user):
    For each emotion the user journaled about since now - days: number of
    entries, average emotion score, first and last capture time. Most
    frequent emotion first.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.config import settings
from wellbloom.exceptions import NotFoundError, OwnershipError, ValidationError
from wellbloom.models.emotion import Emotion, EmotionRecord
from wellbloom.models.journal import JournalEntry
from wellbloom.models.user import User
from wellbloom.schemas.common import OffsetPage, OffsetPagination
from wellbloom.schemas.journal import (
    EmotionSummaryItem,
    JournalEntryCreate,
    JournalEntryDetail,
    JournalEntryResponse,
    JournalListItem,
    JournalNoteUpdate,
    JournalSummaryResponse,
)
from wellbloom.services.base import storage_guard
from wellbloom.services.query import Criteria, Page, fetch_page

logger = logging.getLogger(__name__)


class JournalService:

    def _joined_query(self):
        return select(JournalEntry).options(
            joinedload(JournalEntry.user),
            joinedload(JournalEntry.record).joinedload(EmotionRecord.emotion),
        )

    async def _load(self, db: AsyncSession, entry_id: int) -> Optional[JournalEntry]:
        stmt = (
            self._joined_query()
            .where(JournalEntry.id == entry_id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one_or_none()

    async def _load_or_404(self, db: AsyncSession, entry_id: int) -> JournalEntry:
        entry = await self._load(db, entry_id)
        if entry is None:
            raise NotFoundError(resource="Journal entry", resource_id=entry_id)
        return entry

    @staticmethod
    def _to_response(entry: JournalEntry) -> JournalEntryResponse:
        return JournalEntryResponse(
            id=entry.id,
            user_id=entry.user_id,
            user_name=entry.user.name,
            record_id=entry.record_id,
            note=entry.note,
            captured_at=entry.record.captured_at,
            emotion_name=entry.record.emotion.name,
        )

    @staticmethod
    def _to_detail(entry: JournalEntry) -> JournalEntryDetail:
        emotion = entry.record.emotion
        return JournalEntryDetail(
            id=entry.id,
            user_id=entry.user_id,
            user_name=entry.user.name,
            user_email=entry.user.email,
            record_id=entry.record_id,
            note=entry.note,
            captured_at=entry.record.captured_at,
            emotion_name=emotion.name,
            emotion_description=emotion.description,
            emotion_score=emotion.score,
        )

    @storage_guard("create journal entry")
    async def create_entry(
        self, db: AsyncSession, data: JournalEntryCreate
    ) -> JournalEntryResponse:
        """
        Annotate one of the user's own emotion records with a journal note.

        What:    Both references are checked before anything is written; a
                 missing user and a missing record are reported together.
        Who:     Called by POST /api/journal.

        Args:
            db: Request session
            data: user_id, record_id and an optional note

        Returns:
            The entry joined with its record and emotion

        Raises:
            ValidationError: user_id and/or record_id name nothing (400), one
                error per missing field
            OwnershipError: The record belongs to another user (403); no
                entry is written
        """
        errors: List[Dict[str, str]] = []
        user = await db.get(User, data.user_id)
        if user is None:
            errors.append({"field": "user_id", "message": "User does not exist"})
        record = await db.get(EmotionRecord, data.record_id)
        if record is None:
            errors.append({"field": "record_id", "message": "Emotion record does not exist"})
        if errors:
            raise ValidationError(errors=errors)

        if record.user_id != data.user_id:
            logger.warning(
                "Journal ownership mismatch: record_id=%d belongs to user_id=%d, not %d",
                record.id, record.user_id, data.user_id,
            )
            raise OwnershipError(
                context={"record_id": data.record_id, "user_id": data.user_id},
            )

        entry = JournalEntry(user_id=data.user_id, record_id=data.record_id, note=data.note)
        db.add(entry)
        await db.flush()
        logger.info("Journal entry created: id=%d user_id=%d", entry.id, data.user_id)

        return self._to_response(await self._load(db, entry.id))

    @storage_guard("list journal entries by user")
    async def list_by_user(
        self, db: AsyncSession, user_id: int, page: Page
    ) -> OffsetPage[JournalListItem]:
        stmt = (
            self._joined_query()
            .join(JournalEntry.record)
            .order_by(EmotionRecord.captured_at.desc(), JournalEntry.id.desc())
        )
        rows, total = await fetch_page(
            db,
            stmt,
            Criteria(JournalEntry.user_id == user_id),
            page,
            count_from=JournalEntry,
        )
        return OffsetPage[JournalListItem](
            data=[
                JournalListItem(
                    id=e.id,
                    record_id=e.record_id,
                    note=e.note,
                    captured_at=e.record.captured_at,
                    emotion_name=e.record.emotion.name,
                    emotion_score=e.record.emotion.score,
                )
                for e in rows
            ],
            pagination=OffsetPagination(total=total, limit=page.limit, offset=page.offset),
        )

    @storage_guard("get journal entry")
    async def get_entry(self, db: AsyncSession, entry_id: int) -> JournalEntryDetail:
        return self._to_detail(await self._load_or_404(db, entry_id))

    @storage_guard("update journal note")
    async def update_note(
        self, db: AsyncSession, entry_id: int, data: JournalNoteUpdate
    ) -> JournalEntryDetail:
        entry = await self._load_or_404(db, entry_id)
        entry.note = data.note
        await db.flush()
        return self._to_detail(await self._load(db, entry_id))

    @storage_guard("delete journal entry")
    async def delete_entry(self, db: AsyncSession, entry_id: int) -> None:
        """Hard delete; the annotated emotion record is kept."""
        entry = await db.get(JournalEntry, entry_id)
        if entry is None:
            raise NotFoundError(resource="Journal entry", resource_id=entry_id)
        await db.delete(entry)
        await db.flush()
        logger.info("Journal entry deleted: id=%d", entry_id)

    @storage_guard("journal emotional summary")
    async def summary_by_user(
        self, db: AsyncSession, user_id: int, days: Optional[int] = None
    ) -> JournalSummaryResponse:
        """
        Emotional summary of a user's journal over a trailing window.

        What:    Groups the user's entries whose record was captured within
                 the last `days` days by emotion.
        Who:     Called by GET /api/journal/summary/user/{id}.

        Window:
            `days` falls back to SUMMARY_DEFAULT_DAYS when not given. The
            lower bound is inclusive and computed in UTC.

        Returns:
            One item per emotion, most journaled first, ties broken by
            emotion id. A user without entries gets an empty list.
        """
        days = days or settings.summary_default_days
        since = datetime.now(timezone.utc) - timedelta(days=days)

        total = func.count(JournalEntry.id).label("total_entries")
        stmt = (
            select(
                Emotion.id,
                Emotion.name,
                total,
                func.avg(Emotion.score).label("average_score"),
                func.min(EmotionRecord.captured_at).label("first_captured_at"),
                func.max(EmotionRecord.captured_at).label("last_captured_at"),
            )
            .select_from(JournalEntry)
            .join(EmotionRecord, JournalEntry.record_id == EmotionRecord.id)
            .join(Emotion, EmotionRecord.emotion_id == Emotion.id)
            .where(JournalEntry.user_id == user_id, EmotionRecord.captured_at >= since)
            .group_by(Emotion.id, Emotion.name)
            .order_by(total.desc(), Emotion.id)
        )
        result = await db.execute(stmt)

        return JournalSummaryResponse(
            user_id=user_id,
            days=days,
            since=since,
            emotions=[
                EmotionSummaryItem(
                    emotion_id=row.id,
                    emotion_name=row.name,
                    total_entries=row.total_entries,
                    average_score=(
                        float(row.average_score) if row.average_score is not None else None
                    ),
                    first_captured_at=row.first_captured_at,
                    last_captured_at=row.last_captured_at,
                )
                for row in result.all()
            ],
        )


# Module-level singleton
journal_service = JournalService()
