"""
Unified SQLAlchemy models for Question Router.

Single source of truth for all database models. Used by the routing core,
the API backend and the scheduler.

Usage:
    from qa_routing.models import User, Question
"""

from .base import Base, as_utc, utcnow
from .question import Question, QuestionResponse
from .user import User

__all__ = [
    # Base
    "Base",
    "as_utc",
    "utcnow",
    # Models
    "Question",
    "QuestionResponse",
    "User",
]
