"""
Workload tracking for moderators.
"""

from sqlalchemy.orm import Session

from qa_routing.repositories import QuestionRepository


class WorkloadTracker:
    """
    Reports how many active questions a moderator currently holds.

    Every call queries the question store. Results are never cached, so a
    decision made under a moderator lock sees assignments committed by the
    previous lock holder.
    """

    def __init__(self, session: Session):
        self.questions = QuestionRepository(session)

    def current_workload(self, moderator_id: int) -> int:
        """Count of the moderator's questions in assigned or in-progress."""
        return self.questions.count_active_for(moderator_id)
