"""
Pytest fixtures for Question Router tests.

Each test gets a fresh file-backed SQLite database under tmp_path, so
concurrent assignment tests run on real separate connections.
"""

import itertools
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

os.environ.setdefault("ROUTING_LOCK_BACKEND", "memory")

import pytest  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

import qa_routing.models  # noqa: E402,F401  # registers tables on Base.metadata
from qa_routing.db import Base, build_engine  # noqa: E402
from qa_routing.models import Question, User  # noqa: E402
from qa_routing.routing import AssignmentEngine, ModeratorLockRegistry  # noqa: E402


@pytest.fixture(scope="function")
def test_db(tmp_path):
    """Create a fresh test database for each test."""
    db_url = f"sqlite:///{tmp_path / 'routing.db'}"
    engine = build_engine(db_url)

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield db_url, TestingSessionLocal, engine

    engine.dispose()


@pytest.fixture
def session_scope(test_db) -> Callable:
    """Commit-or-rollback session context manager bound to the test database."""
    _, TestingSessionLocal, _ = test_db

    @contextmanager
    def scope() -> Iterator[Session]:
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def lock_registry() -> ModeratorLockRegistry:
    """In-memory moderator locks, independent per test."""
    return ModeratorLockRegistry(wait=5.0)


@pytest.fixture
def routing_engine(session_scope, lock_registry) -> AssignmentEngine:
    return AssignmentEngine(session_scope=session_scope, locks=lock_registry)


@pytest.fixture
def make_moderator(session_scope) -> Callable[..., int]:
    """Factory creating a user (an available moderator by default); returns its id."""
    counter = itertools.count(1)

    def _make(
        skills=(),
        name: str | None = None,
        role: str = "moderator",
        approved: bool = True,
        verified: bool = True,
    ) -> int:
        n = next(counter)
        with session_scope() as session:
            user = User(
                name=name or f"Moderator {n}",
                email=f"{role}{n}@example.com",
                role=role,
                skills=list(skills),
                approved=approved,
                verified=verified,
            )
            session.add(user)
            session.flush()
            return user.id

    return _make


@pytest.fixture
def make_question(session_scope) -> Callable[..., int]:
    """Factory creating a question (pending by default); returns its id."""
    counter = itertools.count(1)

    def _make(
        skills=(),
        title: str | None = None,
        status: str = "pending",
        priority: str = "medium",
        assigned_to_id: int | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> int:
        n = next(counter)
        fields = {
            "title": title or f"Question {n}",
            "content": f"Content of question {n}",
            "status": status,
            "priority": priority,
            "assigned_to_id": assigned_to_id,
            "suggested_skills": list(skills),
        }
        if created_at is not None:
            fields["created_at"] = created_at
        if updated_at is not None:
            fields["updated_at"] = updated_at
        with session_scope() as session:
            question = Question(**fields)
            session.add(question)
            session.flush()
            return question.id

    return _make


@pytest.fixture
def load_question(session_scope) -> Callable[[int], Question]:
    """Read a question back in a fresh session."""

    def _load(question_id: int) -> Question:
        with session_scope() as session:
            question = session.get(Question, question_id)
            # Touch lazy attributes before the session closes
            _ = question.responses
            return question

    return _load
