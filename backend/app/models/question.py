"""Tests and questions."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Section(str, PyEnum):
    """Digital SAT section."""

    READING_WRITING = "reading_writing"
    MATH = "math"


class Difficulty(str, PyEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RwDomain(str, PyEnum):
    """Reading & Writing content domains."""

    INFORMATION_IDEAS = "information_ideas"
    CRAFT_STRUCTURE = "craft_structure"
    EXPRESSION_IDEAS = "expression_ideas"
    STANDARD_ENGLISH = "standard_english"


class MathDomain(str, PyEnum):
    """Math content domains."""

    ALGEBRA = "algebra"
    ADVANCED_MATH = "advanced_math"
    PROBLEM_SOLVING_DATA = "problem_solving_data"
    GEOMETRY_TRIG = "geometry_trig"


class AnswerLetter(str, PyEnum):
    """Multiple-choice option letter."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


answer_letter_type = Enum(AnswerLetter, name="answer_letter", values_callable=_enum_values)


class Test(Base):
    """A full-length practice test."""

    __tablename__ = "tests"
    __test__ = False  # not a pytest class

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    questions = relationship("Question", back_populates="test")


class Question(Base):
    """A single multiple-choice question.

    Questions with a null ``test_id`` belong to the topic-practice pool.
    """

    __tablename__ = "questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tests.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=True,
    )

    section = Column(
        Enum(Section, name="question_section", values_callable=_enum_values),
        nullable=False,
    )
    module_number = Column(SmallInteger, nullable=False, default=1)

    question_text = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)
    correct_answer = Column(answer_letter_type, nullable=False)
    explanation = Column(Text, nullable=False, default="")

    difficulty = Column(
        Enum(Difficulty, name="question_difficulty", values_callable=_enum_values),
        nullable=False,
        default=Difficulty.MEDIUM,
    )
    rw_domain = Column(Enum(RwDomain, name="rw_domain", values_callable=_enum_values), nullable=True)
    math_domain = Column(
        Enum(MathDomain, name="math_domain", values_callable=_enum_values), nullable=True
    )
    topic = Column(String(255), nullable=True)
    order_index = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    test = relationship("Test", back_populates="questions")

    __table_args__ = (
        CheckConstraint("module_number IN (1, 2)", name="ck_questions_module_number"),
        CheckConstraint(
            "(section = 'reading_writing' AND math_domain IS NULL) "
            "OR (section = 'math' AND rw_domain IS NULL)",
            name="ck_questions_domain_matches_section",
        ),
        Index("ix_questions_test_order", "test_id", "order_index"),
        Index("ix_questions_section", "section"),
    )

    @property
    def options(self) -> dict[AnswerLetter, str]:
        """Option texts keyed by letter."""
        return {
            AnswerLetter.A: self.option_a,
            AnswerLetter.B: self.option_b,
            AnswerLetter.C: self.option_c,
            AnswerLetter.D: self.option_d,
        }

    @property
    def domain(self) -> RwDomain | MathDomain | None:
        return self.rw_domain if self.section == Section.READING_WRITING else self.math_domain
