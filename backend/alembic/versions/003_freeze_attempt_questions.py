"""Freeze attempt questions, submission claims and practice answer log

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 14:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision = "003"
down_revision = "002"
branch_labels = None
depends_on = None

ANSWER_LETTER = postgresql.ENUM("A", "B", "C", "D", name="answer_letter", create_type=False)


def upgrade() -> None:
    op.add_column(
        "test_attempts",
        sa.Column("submission_started_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "attempt_questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "attempt_id",
            sa.Uuid(),
            sa.ForeignKey("test_attempts.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("snapshot_json", sa.JSON(), nullable=False),
        sa.UniqueConstraint("attempt_id", "position", name="uq_attempt_question_position"),
        sa.UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question_question"),
    )
    op.create_index("ix_attempt_questions_attempt_id", "attempt_questions", ["attempt_id"])

    op.create_table(
        "practice_answers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("answered_on", sa.Date(), nullable=False),
        sa.Column("selected_answer", ANSWER_LETTER, nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint(
            "user_id", "question_id", "answered_on", name="uq_practice_answer_user_question_day"
        ),
    )
    op.create_index("ix_practice_answers_user_id", "practice_answers", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_practice_answers_user_id", table_name="practice_answers")
    op.drop_table("practice_answers")
    op.drop_index("ix_attempt_questions_attempt_id", table_name="attempt_questions")
    op.drop_table("attempt_questions")
    op.drop_column("test_attempts", "submission_started_at")
