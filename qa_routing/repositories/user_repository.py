"""User repository: the moderator directory used by the routing core."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import case, func

from qa_routing.constants import ACTIVE_STATUSES, UserRole
from qa_routing.models import Question, User

from .base import BaseRepository


@dataclass
class ModeratorWorkload:
    """Per-moderator assignment counts for routing statistics."""

    id: int
    name: str
    email: str
    skills: list[str] = field(default_factory=list)
    total_assigned: int = 0
    active_questions: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "skills": list(self.skills),
            "total_assigned": self.total_assigned,
            "active_questions": self.active_questions,
        }


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    @staticmethod
    def _available_conditions() -> list:
        return [
            User.role == UserRole.MODERATOR.value,
            User.approved.is_(True),
            User.verified.is_(True),
        ]

    def find_available_moderators(self, skills: Iterable[str] | None = None) -> list[User]:
        """
        Get approved, verified moderators ordered by id.

        When skills are given, only moderators holding at least one of them
        (case-insensitive equality) are returned. The overlap is checked in
        Python so the JSON column behaves the same on SQLite and PostgreSQL.
        """
        moderators = (
            self.session.query(User).filter(*self._available_conditions()).order_by(User.id.asc()).all()
        )

        wanted = {s.strip().lower() for s in (skills or []) if s and s.strip()}
        if not wanted:
            return moderators

        return [
            m for m in moderators if wanted & {s.strip().lower() for s in (m.skills or []) if s}
        ]

    def all_moderator_skills(self) -> list[str]:
        """Distinct skills across available moderators, first-seen order."""
        seen: dict[str, str] = {}
        for moderator in self.find_available_moderators():
            for skill in moderator.skills or []:
                key = skill.strip().lower()
                if key and key not in seen:
                    seen[key] = skill.strip()
        return list(seen.values())

    def moderator_workloads(self) -> list[ModeratorWorkload]:
        """
        Total and active assignment counts for each available moderator.

        Uses one grouped outer join instead of a query per moderator.
        """
        active = func.sum(case((Question.status.in_(ACTIVE_STATUSES), 1), else_=0))
        rows = (
            self.session.query(User, func.count(Question.id), active)
            .outerjoin(Question, Question.assigned_to_id == User.id)
            .filter(*self._available_conditions())
            .group_by(User.id)
            .order_by(User.id.asc())
            .all()
        )
        return [
            ModeratorWorkload(
                id=user.id,
                name=user.name,
                email=user.email,
                skills=list(user.skills or []),
                total_assigned=total or 0,
                active_questions=int(active_count or 0),
            )
            for user, total, active_count in rows
        ]
