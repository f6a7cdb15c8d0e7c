"""
Candidate scoring: skill match discounted by current workload.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from qa_routing.models import User

from .skill_matcher import match_fraction
from .workload import WorkloadTracker


def score(skill_match: float, workload: int) -> float:
    """
    Ranking score for a candidate.

    score = skill_match / (workload + 1). The +1 keeps the score finite at
    zero workload; busier moderators always score strictly lower for the
    same skill match.
    """
    if workload < 0:
        raise ValueError("workload cannot be negative")
    return skill_match / (workload + 1)


@dataclass
class ScoredCandidate:
    moderator: User
    score: float
    skill_match: float
    workload: int


class CandidateScorer:
    """
    Ranks moderators for a question.

    Candidates are expected in directory order (ascending moderator id).
    Sorting is stable, so equal scores keep that order and the lowest
    moderator id wins a tie.
    """

    def __init__(self, workload: WorkloadTracker):
        self.workload = workload

    def evaluate(self, moderator: User, question_skills: Sequence[str]) -> ScoredCandidate:
        """Compute skill match, live workload and score for one moderator."""
        skill_match = match_fraction(moderator.skills or [], question_skills)
        workload = self.workload.current_workload(moderator.id)
        return ScoredCandidate(
            moderator=moderator,
            score=score(skill_match, workload),
            skill_match=skill_match,
            workload=workload,
        )

    def rank(
        self,
        moderators: Sequence[User],
        question_skills: Sequence[str],
    ) -> list[ScoredCandidate]:
        """Score every moderator, best first."""
        scored = [self.evaluate(m, question_skills) for m in moderators]
        scored.sort(key=lambda c: c.score, reverse=True)
        return scored

    def least_busy(self, moderators: Sequence[User]) -> ScoredCandidate | None:
        """
        Pick the moderator with the lowest workload, ignoring skills.

        Returns None for an empty candidate list.
        """
        if not moderators:
            return None
        loads = [
            ScoredCandidate(
                moderator=m,
                score=0.0,
                skill_match=0.0,
                workload=self.workload.current_workload(m.id),
            )
            for m in moderators
        ]
        loads.sort(key=lambda c: c.workload)
        return loads[0]
