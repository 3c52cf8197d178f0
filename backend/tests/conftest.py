"""Pytest configuration and shared fixtures."""

import os
import uuid
from collections.abc import Generator

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ["ENV"] = "test"
os.environ["SEED_ACHIEVEMENTS"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.core.seed_achievements import seed_achievements  # noqa: E402
from app.db.base import Base, import_models  # noqa: E402
from app.main import app  # noqa: E402
from app.models.question import Test  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from tests.helpers.seed import create_question, create_test  # noqa: E402


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test on the shared in-memory engine."""
    from app.db.engine import engine
    from app.db.session import SessionLocal

    import_models()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user(db) -> User:
    """Create a test student user."""
    user_id = uuid.uuid4()
    user = User(
        id=user_id,
        email=f"test_{user_id}@example.com",
        full_name="Test User",
        role=UserRole.STUDENT.value,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_user(db) -> User:
    """A second student, for ownership checks."""
    user_id = uuid.uuid4()
    user = User(
        id=user_id,
        email=f"other_{user_id}@example.com",
        full_name="Other User",
        role=UserRole.STUDENT.value,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def achievements(db) -> int:
    """Default achievement catalog."""
    return seed_achievements(db)


@pytest.fixture
def published_test(db) -> Test:
    """Published test with one Reading & Writing and one Math question.

    The correct answers are B (RW) and C (Math).
    """
    test = create_test(db, title="Practice Test 1")
    create_question(db, test=test, section="reading_writing", correct_answer="B", order_index=1)
    create_question(db, test=test, section="math", correct_answer="C", order_index=2)
    db.commit()
    return test


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database dependency override."""
    from app.db.session import get_db

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session, it's managed by the db fixture

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers_student(test_user):
    """Create Authorization header for student user."""
    from app.core.security import create_access_token

    token = create_access_token(user_id=str(test_user.id), role=test_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_other(other_user):
    from app.core.security import create_access_token

    token = create_access_token(user_id=str(other_user.id), role=other_user.role)
    return {"Authorization": f"Bearer {token}"}
