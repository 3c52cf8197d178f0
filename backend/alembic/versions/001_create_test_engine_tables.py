"""Create tests, questions, attempts and answers

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

SECTION = ("reading_writing", "math")
DIFFICULTY = ("easy", "medium", "hard")
RW_DOMAIN = ("information_ideas", "craft_structure", "expression_ideas", "standard_english")
MATH_DOMAIN = ("algebra", "advanced_math", "problem_solving_data", "geometry_trig")
ANSWER_LETTER = ("A", "B", "C", "D")

ENUM_TYPES = {
    "question_section": SECTION,
    "question_difficulty": DIFFICULTY,
    "rw_domain": RW_DOMAIN,
    "math_domain": MATH_DOMAIN,
    "answer_letter": ANSWER_LETTER,
}


def enum(name: str) -> postgresql.ENUM:
    """Reference to an enum type created up front."""
    return postgresql.ENUM(*ENUM_TYPES[name], name=name, create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUM_TYPES.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "tests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "test_id",
            sa.Uuid(),
            sa.ForeignKey("tests.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=True,
        ),
        sa.Column("section", enum("question_section"), nullable=False),
        sa.Column("module_number", sa.SmallInteger(), nullable=False, server_default="1"),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("option_a", sa.Text(), nullable=False),
        sa.Column("option_b", sa.Text(), nullable=False),
        sa.Column("option_c", sa.Text(), nullable=False),
        sa.Column("option_d", sa.Text(), nullable=False),
        sa.Column("correct_answer", enum("answer_letter"), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "difficulty",
            enum("question_difficulty"),
            nullable=False,
            server_default="medium",
        ),
        sa.Column("rw_domain", enum("rw_domain"), nullable=True),
        sa.Column("math_domain", enum("math_domain"), nullable=True),
        sa.Column("topic", sa.String(255), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("module_number IN (1, 2)", name="ck_questions_module_number"),
        sa.CheckConstraint(
            "(section = 'reading_writing' AND math_domain IS NULL) "
            "OR (section = 'math' AND rw_domain IS NULL)",
            name="ck_questions_domain_matches_section",
        ),
    )
    op.create_index("ix_questions_test_order", "questions", ["test_id", "order_index"])
    op.create_index("ix_questions_section", "questions", ["section"])

    op.create_table(
        "test_attempts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id", sa.Uuid(), sa.ForeignKey("users.id", onupdate="CASCADE"), nullable=False
        ),
        sa.Column(
            "test_id",
            sa.Uuid(),
            sa.ForeignKey("tests.id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_score", sa.Integer(), nullable=True),
        sa.Column("rw_score", sa.Integer(), nullable=True),
        sa.Column("math_score", sa.Integer(), nullable=True),
        sa.Column("rw_correct", sa.Integer(), nullable=True),
        sa.Column("rw_total", sa.Integer(), nullable=True),
        sa.Column("math_correct", sa.Integer(), nullable=True),
        sa.Column("math_total", sa.Integer(), nullable=True),
    )
    op.create_index("ix_test_attempts_user_started", "test_attempts", ["user_id", "started_at"])
    op.create_index("ix_test_attempts_completed_at", "test_attempts", ["completed_at"])

    op.create_table(
        "user_answers",
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
        sa.Column("selected_answer", enum("answer_letter"), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_marked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("time_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "answered_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("attempt_id", "question_id", name="uq_user_answer_attempt_question"),
    )
    op.create_index("ix_user_answers_attempt_id", "user_answers", ["attempt_id"])


def downgrade() -> None:
    op.drop_index("ix_user_answers_attempt_id", table_name="user_answers")
    op.drop_table("user_answers")
    op.drop_index("ix_test_attempts_completed_at", table_name="test_attempts")
    op.drop_index("ix_test_attempts_user_started", table_name="test_attempts")
    op.drop_table("test_attempts")
    op.drop_index("ix_questions_section", table_name="questions")
    op.drop_index("ix_questions_test_order", table_name="questions")
    op.drop_table("questions")
    op.drop_table("tests")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    for name in reversed(list(ENUM_TYPES)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
