"""
Repository pattern implementations for data access.

Repositories are the question store and user directory the routing core
talks to.

Usage:
    from qa_routing.repositories import QuestionRepository
    from qa_routing.db import db

    with db.session() as session:
        repo = QuestionRepository(session)
        pending = repo.list_pending()
"""

from .base import BaseRepository
from .question_repository import QuestionRepository
from .user_repository import ModeratorWorkload, UserRepository

__all__ = [
    "BaseRepository",
    "ModeratorWorkload",
    "QuestionRepository",
    "UserRepository",
]
