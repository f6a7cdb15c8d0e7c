"""
User-related SQLAlchemy models.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from qa_routing.constants import MAX_MODERATOR_SKILLS, USER_ROLES, UserRole

from .base import Base, utcnow

if TYPE_CHECKING:
    from .question import Question


class User(Base):
    """
    User model covering askers, moderators and admins.

    Attributes:
        name: Display name
        email: Unique email address
        role: One of user, moderator, admin
        skills: Skill names a moderator can answer for (case preserved)
        approved: Moderator approved by an admin
        verified: Email address verified
    """

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_role_approved", "role", "approved"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    role: Mapped[str] = mapped_column(String(16), default=UserRole.USER.value)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    approved: Mapped[bool] = mapped_column(Boolean, default=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="author", foreign_keys="Question.author_id"
    )
    assigned_questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="assigned_to", foreign_keys="Question.assigned_to_id"
    )

    @validates("role")
    def _validate_role(self, key: str, value: str) -> str:
        if value not in USER_ROLES:
            raise ValueError(f"Invalid role: {value}")
        return value

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.lower().strip()

    @validates("skills")
    def _validate_skills(self, key: str, value: list[str] | None) -> list[str]:
        skills = list(value or [])
        if len(skills) > MAX_MODERATOR_SKILLS:
            raise ValueError(f"Cannot have more than {MAX_MODERATOR_SKILLS} skills")
        return skills

    @property
    def is_available_moderator(self) -> bool:
        """Only approved and verified moderators may be assigned questions."""
        return self.role == UserRole.MODERATOR.value and bool(self.approved) and bool(self.verified)

    def to_summary(self) -> dict:
        """Public subset used when embedding a user in API payloads."""
        return {"id": self.id, "name": self.name, "email": self.email}
