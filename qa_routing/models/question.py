"""
Question-related SQLAlchemy models.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from qa_routing.constants import (
    MAX_RESPONSE_LENGTH,
    MAX_SUGGESTED_SKILLS,
    MAX_TAGS,
    QUESTION_PRIORITIES,
    QUESTION_STATUSES,
    QuestionPriority,
    QuestionStatus,
)

from .base import Base, as_utc, utcnow

if TYPE_CHECKING:
    from .user import User


class Question(Base):
    """
    A question submitted by a user and routed to a moderator.

    Only the routing subset (status, assigned_to_id, suggested_skills,
    priority, updated_at) is touched by the assignment engine.
    """
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_assigned_status", "assigned_to_id", "status"),
        Index("ix_questions_status_priority_created", "status", "priority", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    summary: Mapped[Optional[str]] = mapped_column(String(300))
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), index=True)
    assigned_to_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"))
    status: Mapped[str] = mapped_column(String(16), default=QuestionStatus.PENDING.value)
    priority: Mapped[str] = mapped_column(String(16), default=QuestionPriority.MEDIUM.value)
    suggested_skills: Mapped[List[str]] = mapped_column(JSON, default=list)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    author: Mapped[Optional["User"]] = relationship(
        "User", back_populates="questions", foreign_keys=[author_id]
    )
    assigned_to: Mapped[Optional["User"]] = relationship(
        "User", back_populates="assigned_questions", foreign_keys=[assigned_to_id]
    )
    responses: Mapped[List["QuestionResponse"]] = relationship(
        "QuestionResponse",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionResponse.id",
    )

    @validates("status")
    def _validate_status(self, key: str, value: str) -> str:
        if value not in QUESTION_STATUSES:
            raise ValueError(f"Invalid status: {value}")
        return value

    @validates("priority")
    def _validate_priority(self, key: str, value: str) -> str:
        if value not in QUESTION_PRIORITIES:
            raise ValueError(f"Invalid priority: {value}")
        return value

    @validates("suggested_skills")
    def _validate_suggested_skills(self, key: str, value: List[str] | None) -> List[str]:
        skills = list(value or [])
        if len(skills) > MAX_SUGGESTED_SKILLS:
            raise ValueError(f"Cannot have more than {MAX_SUGGESTED_SKILLS} suggested skills")
        return skills

    @validates("tags")
    def _validate_tags(self, key: str, value: List[str] | None) -> List[str]:
        tags = list(value or [])
        if len(tags) > MAX_TAGS:
            raise ValueError(f"Cannot have more than {MAX_TAGS} tags")
        return tags

    @property
    def is_pending(self) -> bool:
        return self.status == QuestionStatus.PENDING.value

    @property
    def has_answer(self) -> bool:
        return any(response.is_answer for response in self.responses)

    def hours_since_update(self, now: datetime | None = None) -> int:
        """Whole hours elapsed since the last mutation."""
        now = as_utc(now) if now else utcnow()
        updated = as_utc(self.updated_at) or now
        return int((now - updated).total_seconds() // 3600)

    def to_dict(self) -> Dict:
        """
        Convert the question record into a serializable dictionary.

        Returns:
            Dictionary compatible with API responses.
        """
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "author": self.author.to_summary() if self.author else None,
            "assigned_to": self.assigned_to.to_summary() if self.assigned_to else None,
            "status": self.status,
            "priority": self.priority,
            "suggested_skills": list(self.suggested_skills or []),
            "tags": list(self.tags or []),
            "response_count": len(self.responses),
            "created_at": as_utc(self.created_at),
            "updated_at": as_utc(self.updated_at),
        }


class QuestionResponse(Base):
    """
    A moderator's reply to a question.

    Responses drive the lifecycle after assignment: a reply moves an
    assigned question to in-progress, an answer moves it to answered.
    """
    __tablename__ = "question_responses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    question_id: Mapped[int] = mapped_column(ForeignKey("questions.id"), index=True)
    moderator_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    is_answer: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    question: Mapped["Question"] = relationship("Question", back_populates="responses")
    moderator: Mapped["User"] = relationship("User")

    @validates("content")
    def _validate_content(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Response content is required")
        if len(value) > MAX_RESPONSE_LENGTH:
            raise ValueError(f"Response cannot exceed {MAX_RESPONSE_LENGTH} characters")
        return value
