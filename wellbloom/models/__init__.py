# Models package init
"""
WellBloom Backend: ORM Models
==============================

Importing this package registers every table on Base.metadata, which
Alembic autogenerate and the test suite's create_all rely on.
"""

from wellbloom.models.activity import Activity, Exercise, Meditation, Shift
from wellbloom.models.admin import Administrator, AdminRole, Report
from wellbloom.models.emotion import Emotion, EmotionRecord, Phrase
from wellbloom.models.journal import JournalEntry
from wellbloom.models.user import User

__all__ = [
    "Activity",
    "Exercise",
    "Meditation",
    "Shift",
    "Administrator",
    "AdminRole",
    "Report",
    "Emotion",
    "EmotionRecord",
    "Phrase",
    "JournalEntry",
    "User",
]
