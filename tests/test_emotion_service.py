"""
WellBloom Backend: Emotion, Phrase and Emotion Record Service Tests
====================================================================

What we test:
    ✅ Unique emotion names (create and rename), count unchanged on conflict
    ✅ Page-number pagination: windows do not overlap, total is stable
    ✅ Delete guard while emotion records exist; phrases go with the emotion
    ✅ Phrases: empty lists, random pick, search over text and author
    ✅ Emotion records: missing references, per-user stats ordering
"""

import pytest
from sqlalchemy import func, select

from wellbloom.exceptions import (
    ConflictError,
    DependencyConflictError,
    NotFoundError,
    ValidationError,
)
from wellbloom.models.emotion import Emotion, Phrase
from wellbloom.schemas.emotion import (
    EmotionCreate,
    EmotionRecordCreate,
    EmotionUpdate,
    PhraseCreate,
    PhraseUpdate,
)
from wellbloom.services.emotion_record_service import EmotionRecordService
from wellbloom.services.emotion_service import EmotionService
from wellbloom.services.phrase_service import PhraseService
from wellbloom.services.query import Page


async def _count(db_session, column) -> int:
    return (await db_session.execute(select(func.count(column)))).scalar_one()


class TestEmotionService:

    def setup_method(self):
        self.service = EmotionService()

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts_and_writes_nothing(self, db_session):
        await self.service.create_emotion(db_session, EmotionCreate(name="alegría", score=9))

        with pytest.raises(ConflictError):
            await self.service.create_emotion(db_session, EmotionCreate(name="alegría", score=3))

        assert await _count(db_session, Emotion.id) == 1

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name_conflicts(self, db_session, make_emotion):
        await make_emotion("calma")
        tristeza = await make_emotion("tristeza", score=2)

        with pytest.raises(ConflictError):
            await self.service.update_emotion(db_session, tristeza.id, EmotionUpdate(name="calma"))

    @pytest.mark.asyncio
    async def test_update_keeping_own_name_is_allowed(self, db_session, make_emotion):
        calma = await make_emotion("calma", score=7)

        updated = await self.service.update_emotion(
            db_session, calma.id, EmotionUpdate(name="calma", score=8)
        )

        assert updated.score == 8

    @pytest.mark.asyncio
    async def test_pages_do_not_overlap_and_total_is_stable(self, db_session, make_emotion):
        for i in range(15):
            await make_emotion(f"emoción {i:02d}")

        first = await self.service.list_emotions(db_session, Page.from_number(1, 10))
        second = await self.service.list_emotions(db_session, Page.from_number(2, 10))

        assert len(first.data) == 10
        assert len(second.data) == 5
        assert {e.id for e in first.data}.isdisjoint({e.id for e in second.data})
        assert first.pagination.total == second.pagination.total == 15
        assert second.pagination.page == 2
        assert second.pagination.total_pages == 2

    @pytest.mark.asyncio
    async def test_list_phrases_of_emotion_without_phrases_is_empty(self, db_session, make_emotion):
        alegria = await make_emotion("alegría")

        assert await self.service.list_phrases(db_session, alegria.id) == []

    @pytest.mark.asyncio
    async def test_list_phrases_of_missing_emotion_is_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.list_phrases(db_session, 404)

    @pytest.mark.asyncio
    async def test_delete_blocked_by_emotion_records(
        self, db_session, make_user, make_emotion, make_record
    ):
        user = await make_user()
        ira = await make_emotion("ira", score=2)
        await make_record(user.id, ira.id)

        with pytest.raises(DependencyConflictError) as exc_info:
            await self.service.delete_emotion(db_session, ira.id)

        assert exc_info.value.context["dependents"] == ["emotion_records"]
        assert await db_session.get(Emotion, ira.id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_phrases(self, db_session, make_emotion):
        calma = await make_emotion("calma")
        await PhraseService().create_phrase(
            db_session, PhraseCreate(text="Respira hondo", emotion_id=calma.id)
        )

        await self.service.delete_emotion(db_session, calma.id)

        assert await _count(db_session, Emotion.id) == 0
        assert await _count(db_session, Phrase.id) == 0


class TestPhraseService:

    def setup_method(self):
        self.service = PhraseService()

    @pytest.mark.asyncio
    async def test_create_requires_existing_emotion(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_phrase(db_session, PhraseCreate(text="Hola", emotion_id=3))

        assert exc_info.value.errors == [{"field": "emotion_id", "message": "Emotion does not exist"}]

    @pytest.mark.asyncio
    async def test_random_phrase_comes_from_the_emotion(self, db_session, make_emotion):
        alegria = await make_emotion("alegría")
        otra = await make_emotion("miedo")
        texts = {"Sonríe", "Celebra lo pequeño"}
        for text in texts:
            await self.service.create_phrase(db_session, PhraseCreate(text=text, emotion_id=alegria.id))
        await self.service.create_phrase(db_session, PhraseCreate(text="Valor", emotion_id=otra.id))

        phrase = await self.service.random_by_emotion(db_session, alegria.id)

        assert phrase.text in texts
        assert phrase.emotion_name == "alegría"

    @pytest.mark.asyncio
    async def test_random_phrase_without_phrases_is_not_found(self, db_session, make_emotion):
        alegria = await make_emotion("alegría")

        with pytest.raises(NotFoundError):
            await self.service.random_by_emotion(db_session, alegria.id)
        assert await self.service.list_by_emotion(db_session, alegria.id) == []

    @pytest.mark.asyncio
    async def test_search_matches_text_and_author(self, db_session, make_emotion):
        calma = await make_emotion("calma")
        await self.service.create_phrase(
            db_session, PhraseCreate(text="La calma es poder", author="Séneca", emotion_id=calma.id)
        )
        await self.service.create_phrase(
            db_session, PhraseCreate(text="Todo pasa", author="Anónimo", emotion_id=calma.id)
        )

        by_text = await self.service.search_phrases(db_session, "PODER")
        by_author = await self.service.search_phrases(db_session, "anón")

        assert [p.text for p in by_text] == ["La calma es poder"]
        assert [p.text for p in by_author] == ["Todo pasa"]
        assert await self.service.search_phrases(db_session, "zzz") == []

    @pytest.mark.asyncio
    async def test_update_to_missing_emotion_is_validation_error(self, db_session, make_emotion):
        calma = await make_emotion("calma")
        phrase = await self.service.create_phrase(
            db_session, PhraseCreate(text="Todo pasa", emotion_id=calma.id)
        )

        with pytest.raises(ValidationError):
            await self.service.update_phrase(db_session, phrase.id, PhraseUpdate(emotion_id=999))

        updated = await self.service.update_phrase(db_session, phrase.id, PhraseUpdate(author="Anónimo"))
        assert updated.author == "Anónimo"
        assert updated.text == "Todo pasa"


class TestEmotionRecordService:

    def setup_method(self):
        self.service = EmotionRecordService()

    @pytest.mark.asyncio
    async def test_create_with_missing_user_is_not_found(self, db_session, make_emotion):
        alegria = await make_emotion("alegría")

        with pytest.raises(NotFoundError):
            await self.service.create_record(
                db_session, EmotionRecordCreate(user_id=123, emotion_id=alegria.id)
            )

    @pytest.mark.asyncio
    async def test_create_joins_names(self, db_session, make_user, make_emotion):
        user = await make_user("Marta")
        alegria = await make_emotion("alegría")

        record = await self.service.create_record(
            db_session, EmotionRecordCreate(user_id=user.id, emotion_id=alegria.id)
        )

        assert record.user_name == "Marta"
        assert record.emotion_name == "alegría"
        assert record.captured_at is not None

    @pytest.mark.asyncio
    async def test_list_by_user_pages(self, db_session, make_user, make_emotion, make_record):
        user = await make_user()
        other = await make_user()
        calma = await make_emotion("calma")
        for _ in range(15):
            await make_record(user.id, calma.id)
        await make_record(other.id, calma.id)

        first = await self.service.list_by_user(db_session, user.id, Page(limit=10, offset=0))
        second = await self.service.list_by_user(db_session, user.id, Page(limit=10, offset=10))

        assert len(first.data) == 10
        assert len(second.data) == 5
        assert {r.id for r in first.data}.isdisjoint({r.id for r in second.data})
        assert first.pagination.total == second.pagination.total == 15
        assert all(r.user_id == user.id for r in first.data + second.data)

    @pytest.mark.asyncio
    async def test_stats_most_frequent_first(self, db_session, make_user, make_emotion, make_record):
        user = await make_user()
        alegria = await make_emotion("alegría", score=9)
        tristeza = await make_emotion("tristeza", score=2)
        for _ in range(3):
            await make_record(user.id, tristeza.id)
        await make_record(user.id, alegria.id)

        stats = await self.service.stats_by_user(db_session, user.id)

        assert [(s.emotion_name, s.total) for s in stats] == [("tristeza", 3), ("alegría", 1)]
        assert stats[0].average_score == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_delete_missing_record_is_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_record(db_session, 55)
