"""
Question routing core.

Skill matching, workload tracking, candidate scoring, assignment, batch
processing, staleness scanning and routing statistics.
"""

from .batch import BatchResult, process_pending
from .engine import AssignmentEngine, AssignmentResult
from .locks import ModeratorLockRegistry, build_lock_registry, get_lock_registry
from .scorer import CandidateScorer, ScoredCandidate, score
from .skill_matcher import match_fraction, matching_skills
from .staleness import StaleQuestion, find_stale
from .stats import RoutingStats, routing_stats
from .workload import WorkloadTracker

__all__ = [
    "AssignmentEngine",
    "AssignmentResult",
    "BatchResult",
    "CandidateScorer",
    "ModeratorLockRegistry",
    "RoutingStats",
    "ScoredCandidate",
    "StaleQuestion",
    "WorkloadTracker",
    "build_lock_registry",
    "find_stale",
    "get_lock_registry",
    "match_fraction",
    "matching_skills",
    "process_pending",
    "routing_stats",
    "score",
]
