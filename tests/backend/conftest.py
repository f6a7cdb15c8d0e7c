from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.database import db, get_db
from backend.app.dependencies import get_question_summarizer, get_skill_classifier
from backend.app.main import create_app
from qa_routing.classification import KeywordSkillClassifier, TruncatingSummarizer


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    # Engine transactions (db.session) and request sessions share the test database
    db.reset()
    db.initialize(db_url)

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()  # Auto-commit on success like production
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_skill_classifier] = lambda: KeywordSkillClassifier(max_skills=3)
    app.dependency_overrides[get_question_summarizer] = lambda: TruncatingSummarizer()

    with TestClient(app) as client:
        yield client, TestingSessionLocal

    db.reset()
