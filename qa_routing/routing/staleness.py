"""
Staleness scanner: active questions that have not moved for too long.

Read-only. Results are surfaced for operator action (unassign, reassign);
nothing here mutates a question.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from qa_routing.logging import get_logger
from qa_routing.models import Question, as_utc, utcnow
from qa_routing.repositories import QuestionRepository

logger = get_logger("routing.staleness")

DEFAULT_STALE_HOURS = 24


@dataclass
class StaleQuestion:
    id: int
    title: str
    status: str
    priority: str
    author: Optional[dict]
    assigned_to: Optional[dict]
    updated_at: datetime
    hours_since_update: int

    @classmethod
    def from_question(cls, question: Question, now: datetime) -> "StaleQuestion":
        return cls(
            id=question.id,
            title=question.title,
            status=question.status,
            priority=question.priority,
            author=question.author.to_summary() if question.author else None,
            assigned_to=question.assigned_to.to_summary() if question.assigned_to else None,
            updated_at=as_utc(question.updated_at),
            hours_since_update=question.hours_since_update(now),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "priority": self.priority,
            "author": self.author,
            "assigned_to": self.assigned_to,
            "updated_at": self.updated_at,
            "hours_since_update": self.hours_since_update,
        }


def find_stale(
    session: Session,
    hours_threshold: float = DEFAULT_STALE_HOURS,
    now: datetime | None = None,
) -> list[StaleQuestion]:
    """
    Find assigned or in-progress questions last updated before now - hours_threshold.

    Args:
        session: Database session
        hours_threshold: Age in hours after which an active question is stale
        now: Reference time (defaults to the current UTC time)

    Returns:
        Stale questions, oldest update first

    Raises:
        ValueError: if hours_threshold is negative, not finite or too large
    """
    if not math.isfinite(hours_threshold):
        raise ValueError("hours_threshold must be a finite number")
    if hours_threshold < 0:
        raise ValueError("hours_threshold cannot be negative")

    now = as_utc(now) if now else utcnow()
    try:
        cutoff = now - timedelta(hours=hours_threshold)
    except OverflowError as e:
        raise ValueError("hours_threshold is out of range") from e

    questions = QuestionRepository(session).find_stale(cutoff)
    stale = [StaleQuestion.from_question(q, now) for q in questions]

    logger.info("stale_scan_complete", hours_threshold=hours_threshold, count=len(stale))
    return stale


__all__ = ["DEFAULT_STALE_HOURS", "StaleQuestion", "find_stale"]
