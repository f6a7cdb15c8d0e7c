"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Routing engine and moderator locks
- Skill classifier and question summarizer
"""

from fastapi import Depends

from qa_routing.classification import (
    QuestionSummarizer,
    SkillClassifier,
    get_classifier,
    get_summarizer,
)
from qa_routing.routing import AssignmentEngine, ModeratorLockRegistry, get_lock_registry

from ..config import get_settings
from ..database import db

# =============================================================================
# Routing Dependencies
# =============================================================================


def get_moderator_locks() -> ModeratorLockRegistry:
    """Get the process-wide moderator lock registry."""
    return get_lock_registry()


def get_assignment_engine(
    locks: ModeratorLockRegistry = Depends(get_moderator_locks),
) -> AssignmentEngine:
    """
    Get an AssignmentEngine.

    The engine opens its own transactions (db.session) so each decision
    commits while its moderator locks are held, independent of the
    request-scoped session.
    """
    return AssignmentEngine(session_scope=db.session, locks=locks)


# =============================================================================
# Text Analysis Dependencies
# =============================================================================


def get_skill_classifier() -> SkillClassifier:
    """Get the classifier selected by settings (Gemini when a key is set)."""
    return get_classifier(get_settings())


def get_question_summarizer() -> QuestionSummarizer:
    """Get the summarizer selected by settings (Gemini when a key is set)."""
    return get_summarizer(get_settings())


__all__ = [
    "get_assignment_engine",
    "get_moderator_locks",
    "get_question_summarizer",
    "get_skill_classifier",
]
