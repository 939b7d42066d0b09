"""Create WellBloom schema

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates every table: users, emotions, emotion_records, phrases,
       journal_entries, activities, exercises, meditations, administrators,
       reports.
How:   Enumerations (shift, admin role) are stored as VARCHAR with CHECK
       constraints (native_enum=False), matching the ORM models.

Rollback: downgrade() drops all tables in reverse dependency order
(destructive, all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    # ── People ────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("section", sa.String(255), nullable=True),
        _created_at(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # ── Emotions ──────────────────────────────────────────────────────────
    op.create_table(
        "emotions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_emotions"),
        sa.UniqueConstraint("name", name="uq_emotions_name"),
    )

    op.create_table(
        "emotion_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("emotion_id", sa.Integer(), nullable=False),
        _created_at("captured_at"),
        sa.PrimaryKeyConstraint("id", name="pk_emotion_records"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_emotion_records_user"),
        sa.ForeignKeyConstraint(
            ["emotion_id"], ["emotions.id"], name="fk_emotion_records_emotion"
        ),
    )
    # Per-user history is listed newest first
    op.create_index(
        "idx_emotion_records_user_captured",
        "emotion_records",
        ["user_id", "captured_at"],
    )

    op.create_table(
        "phrases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("text", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("emotion_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_phrases"),
        sa.ForeignKeyConstraint(
            ["emotion_id"], ["emotions.id"], name="fk_phrases_emotion", ondelete="CASCADE"
        ),
    )

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(1000), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_journal_entries"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_journal_entries_user"),
        sa.ForeignKeyConstraint(
            ["record_id"], ["emotion_records.id"], name="fk_journal_entries_record"
        ),
    )
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])

    # ── Activities ────────────────────────────────────────────────────────
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_activities"),
    )
    op.create_index("ix_activities_name", "activities", ["name"])

    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column(
            "shift",
            sa.Enum(
                "morning", "afternoon", "evening",
                name="exercise_shift", native_enum=False, length=20,
                create_constraint=True,
            ),
            nullable=True,
        ),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_exercises"),
        sa.ForeignKeyConstraint(["activity_id"], ["activities.id"], name="fk_exercises_activity"),
    )
    op.create_index("ix_exercises_activity_id", "exercises", ["activity_id"])

    op.create_table(
        "meditations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_meditations"),
        sa.ForeignKeyConstraint(
            ["activity_id"], ["activities.id"], name="fk_meditations_activity"
        ),
        # At most one meditation per activity
        sa.UniqueConstraint("activity_id", name="uq_meditations_activity_id"),
    )

    # ── Back office ───────────────────────────────────────────────────────
    op.create_table(
        "administrators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum(
                "superadmin", "moderator", "editor",
                name="admin_role", native_enum=False, length=20,
                create_constraint=True,
            ),
            nullable=False,
        ),
        _created_at(),
        sa.Column("last_access_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_administrators"),
        sa.UniqueConstraint("email", name="uq_administrators_email"),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("admin_id", sa.Integer(), nullable=False),
        sa.Column("question", sa.String(255), nullable=False),
        sa.Column("answer", sa.String(1000), nullable=True),
        sa.Column("note", sa.String(1000), nullable=True),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_reports"),
        sa.ForeignKeyConstraint(["admin_id"], ["administrators.id"], name="fk_reports_admin"),
    )
    op.create_index("ix_reports_admin_id", "reports", ["admin_id"])


def downgrade() -> None:
    op.drop_index("ix_reports_admin_id", table_name="reports")
    op.drop_table("reports")
    op.drop_table("administrators")
    op.drop_table("meditations")
    op.drop_index("ix_exercises_activity_id", table_name="exercises")
    op.drop_table("exercises")
    op.drop_index("ix_activities_name", table_name="activities")
    op.drop_table("activities")
    op.drop_index("ix_journal_entries_user_id", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_table("phrases")
    op.drop_index("idx_emotion_records_user_captured", table_name="emotion_records")
    op.drop_table("emotion_records")
    op.drop_table("emotions")
    op.drop_table("users")
