"""
Question repository: the question store used by the routing core.
"""

from datetime import datetime

from sqlalchemy import case, func
from sqlalchemy.orm import selectinload

from qa_routing.constants import ACTIVE_STATUSES, PRIORITY_RANK, QuestionStatus
from qa_routing.models import Question, QuestionResponse, utcnow

from .base import BaseRepository

_priority_rank = case(PRIORITY_RANK, value=Question.priority, else_=0)


class QuestionRepository(BaseRepository[Question]):
    """
    Repository for Question operations.

    Key features:
    - list_pending: urgency first, FIFO within a priority tier
    - count_active_for: live workload count, never cached
    - assign / unassign / close: status and assignee written in the same flush
    """

    model = Question

    def get_for_update(self, question_id: int) -> Question | None:
        """
        Load a question with a row lock where the dialect supports one.

        SQLite ignores FOR UPDATE; there the moderator locks and SQLite's
        single-writer model keep assignments consistent.
        """
        return (
            self.session.query(Question)
            .filter(Question.id == question_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )

    def list_pending(self, limit: int | None = None) -> list[Question]:
        """
        Get pending questions in batch order.

        Ordered by priority rank descending (urgent first), then creation
        time ascending, then id for determinism.
        """
        query = (
            self.session.query(Question)
            .filter(Question.status == QuestionStatus.PENDING.value)
            .order_by(_priority_rank.desc(), Question.created_at.asc(), Question.id.asc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def count_active_for(self, moderator_id: int) -> int:
        """Count questions currently assigned to or in progress with a moderator."""
        return (
            self.session.query(func.count(Question.id))
            .filter(
                Question.assigned_to_id == moderator_id,
                Question.status.in_(ACTIVE_STATUSES),
            )
            .scalar()
            or 0
        )

    def find_stale(self, cutoff: datetime) -> list[Question]:
        """Active questions last updated before the cutoff, oldest first."""
        return (
            self.session.query(Question)
            .options(selectinload(Question.author), selectinload(Question.assigned_to))
            .filter(
                Question.status.in_(ACTIVE_STATUSES),
                Question.updated_at < cutoff,
            )
            .order_by(Question.updated_at.asc(), Question.id.asc())
            .all()
        )

    def count_by_status(self) -> dict[str, int]:
        """Get question counts grouped by raw status value."""
        rows = (
            self.session.query(Question.status, func.count(Question.id))
            .group_by(Question.status)
            .all()
        )
        return {row[0]: row[1] for row in rows}

    def assign(self, question: Question, moderator_id: int) -> Question:
        """Bind a question to a moderator. The caller owns the transaction."""
        question.assigned_to_id = moderator_id
        question.status = QuestionStatus.ASSIGNED.value
        question.updated_at = utcnow()
        self.session.flush()
        return question

    def unassign(self, question: Question) -> Question:
        """Return a question to the pending pool."""
        question.assigned_to_id = None
        question.status = QuestionStatus.PENDING.value
        question.updated_at = utcnow()
        self.session.flush()
        return question

    def close(self, question: Question) -> Question:
        """Close a question. The assignee is kept for the record."""
        question.status = QuestionStatus.CLOSED.value
        question.updated_at = utcnow()
        self.session.flush()
        return question

    def add_response(
        self,
        question: Question,
        moderator_id: int,
        content: str,
        is_answer: bool = False,
    ) -> QuestionResponse:
        """
        Attach a moderator response and advance the question lifecycle.

        An answer moves the question to answered; any other reply moves an
        assigned question to in-progress.
        """
        response = QuestionResponse(
            moderator_id=moderator_id,
            content=content,
            is_answer=is_answer,
        )
        question.responses.append(response)

        if is_answer:
            question.status = QuestionStatus.ANSWERED.value
        elif question.status == QuestionStatus.ASSIGNED.value:
            question.status = QuestionStatus.IN_PROGRESS.value
        question.updated_at = utcnow()

        self.session.flush()
        return response
