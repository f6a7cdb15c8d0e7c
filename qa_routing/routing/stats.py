"""
Routing statistics: question counts by status and per-moderator workload.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from qa_routing.constants import QuestionStatus
from qa_routing.repositories import ModeratorWorkload, QuestionRepository, UserRepository


@dataclass
class RoutingStats:
    total: int = 0
    pending: int = 0
    assigned: int = 0
    answered: int = 0
    closed: int = 0
    moderators: list[ModeratorWorkload] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "pending": self.pending,
            "assigned": self.assigned,
            "answered": self.answered,
            "closed": self.closed,
            "moderators": [m.to_dict() for m in self.moderators],
        }


def routing_stats(session: Session) -> RoutingStats:
    """
    Aggregate routing counts.

    `assigned` covers assigned and in-progress questions. `closed` is the
    remainder after pending, assigned and answered, so any status outside
    those buckets is counted there too.
    """
    by_status = QuestionRepository(session).count_by_status()

    total = sum(by_status.values())
    pending = by_status.get(QuestionStatus.PENDING.value, 0)
    assigned = by_status.get(QuestionStatus.ASSIGNED.value, 0) + by_status.get(
        QuestionStatus.IN_PROGRESS.value, 0
    )
    answered = by_status.get(QuestionStatus.ANSWERED.value, 0)

    return RoutingStats(
        total=total,
        pending=pending,
        assigned=assigned,
        answered=answered,
        closed=total - pending - assigned - answered,
        moderators=UserRepository(session).moderator_workloads(),
    )


__all__ = ["RoutingStats", "routing_stats"]
