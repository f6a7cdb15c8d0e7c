"""
Tests for candidate scoring and ranking.
"""

import pytest

from qa_routing.models import User
from qa_routing.routing import CandidateScorer, score


class FakeWorkload:
    """Workload tracker backed by a dict; records every lookup."""

    def __init__(self, loads: dict[int, int]):
        self.loads = loads
        self.calls: list[int] = []

    def current_workload(self, moderator_id: int) -> int:
        self.calls.append(moderator_id)
        return self.loads.get(moderator_id, 0)


def moderator(id: int, skills: list[str]) -> User:
    return User(id=id, name=f"Mod {id}", email=f"mod{id}@example.com", role="moderator", skills=skills)


class TestScore:
    def test_zero_workload_is_skill_match(self):
        assert score(1.0, 0) == 1.0
        assert score(0.5, 0) == 0.5

    def test_strictly_decreasing_in_workload(self):
        values = [score(0.8, w) for w in range(6)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_strictly_increasing_in_skill_match(self):
        values = [score(m, 2) for m in (0.1, 0.25, 0.5, 1.0)]
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_full_match_beats_no_match_at_any_workload(self):
        assert score(1.0, 1000) > score(0.0, 0)

    def test_negative_workload_rejected(self):
        with pytest.raises(ValueError):
            score(1.0, -1)


class TestCandidateScorer:
    def test_rank_orders_by_score(self):
        mods = [moderator(1, ["javascript"]), moderator(2, ["python", "django"])]
        scorer = CandidateScorer(FakeWorkload({1: 0, 2: 3}))

        ranked = scorer.rank(mods, ["python"])

        assert [c.moderator.id for c in ranked] == [2, 1]
        assert ranked[0].skill_match == 1.0
        assert ranked[0].workload == 3
        assert ranked[0].score == pytest.approx(0.25)
        assert ranked[1].score == 0.0

    def test_tie_goes_to_lowest_id(self):
        mods = [moderator(3, ["python"]), moderator(7, ["python"]), moderator(9, ["python"])]
        scorer = CandidateScorer(FakeWorkload({}))

        ranked = scorer.rank(mods, ["python"])

        assert [c.moderator.id for c in ranked] == [3, 7, 9]

    def test_workload_breaks_equal_skill_match(self):
        mods = [moderator(1, ["python"]), moderator(2, ["python"])]
        scorer = CandidateScorer(FakeWorkload({1: 1, 2: 0}))

        assert scorer.rank(mods, ["python"])[0].moderator.id == 2

    def test_workload_read_for_every_candidate(self):
        mods = [moderator(1, ["a"]), moderator(2, ["b"])]
        workload = FakeWorkload({})
        CandidateScorer(workload).rank(mods, ["a"])
        assert workload.calls == [1, 2]

    def test_least_busy(self):
        mods = [moderator(1, []), moderator(2, []), moderator(3, [])]
        scorer = CandidateScorer(FakeWorkload({1: 2, 2: 1, 3: 1}))

        best = scorer.least_busy(mods)

        assert best.moderator.id == 2
        assert best.workload == 1

    def test_least_busy_empty(self):
        assert CandidateScorer(FakeWorkload({})).least_busy([]) is None
