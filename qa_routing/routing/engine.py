"""
Assignment engine: binds pending questions to moderators.

Flow for auto_assign:
1. Validate the question exists and is pending
2. Collect candidates (skill overlap, else every available moderator)
3. Lock the candidates, re-read state, score, assign, commit
4. Convert every failure into a soft AssignmentResult

Operator actions (unassign, assign_to, close) change a moderator's
workload too, so they hold the affected moderators' locks while writing.
"""

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import asdict, dataclass
from typing import Any, Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qa_routing.constants import ACTIVE_STATUSES, QuestionStatus
from qa_routing.db import db
from qa_routing.exceptions import (
    InvalidModerator,
    InvalidQuestionState,
    LockTimeout,
    NoCandidates,
    PersistenceFailure,
    QuestionNotFound,
    RoutingError,
)
from qa_routing.logging import LogContext, get_logger
from qa_routing.repositories import QuestionRepository, UserRepository

from .locks import ModeratorLockRegistry, get_lock_registry
from .scorer import CandidateScorer, ScoredCandidate
from .workload import WorkloadTracker

logger = get_logger("routing.engine")

SessionScope = Callable[[], AbstractContextManager[Session]]

MSG_ASSIGNED = "Question auto-assigned successfully"
MSG_ASSIGNED_FALLBACK = "Question assigned to available moderator (no skill match)"
MSG_ASSIGNED_MANUAL = "Question assigned successfully"
MSG_UNASSIGNED = "Question returned to pending"
MSG_CLOSED = "Question closed successfully"
MSG_NOT_PENDING = "Question not found or not pending"
MSG_PERSISTENCE = "Failed to persist assignment"
MSG_UNEXPECTED = "Failed to auto-assign question"


@dataclass
class AssignmentResult:
    """Outcome of one assignment decision. Returned to the caller, never stored."""

    success: bool
    message: str
    question_id: int
    moderator_id: Optional[int] = None
    moderator_name: Optional[str] = None
    score: Optional[float] = None
    skill_match: Optional[float] = None
    workload: Optional[int] = None
    fallback: bool = False
    error: Optional[str] = None

    @classmethod
    def failure(cls, question_id: int, error: RoutingError, message: str | None = None) -> "AssignmentResult":
        return cls(
            success=False,
            message=message or error.message,
            question_id=question_id,
            error=error.code,
        )

    @classmethod
    def unexpected(cls, question_id: int, message: str = MSG_UNEXPECTED) -> "AssignmentResult":
        return cls(success=False, message=message, question_id=question_id, error="unexpected_error")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AssignmentEngine:
    """
    Orchestrates candidate lookup, scoring and assignment.

    Usage:
        engine = AssignmentEngine()
        result = engine.auto_assign(question_id)
        if not result.success:
            ...  # question stays pending for a later batch

    Args:
        session_scope: Callable returning a context-managed Session that
            commits on success and rolls back on error. Defaults to db.session.
        locks: Moderator lock registry. Defaults to the process-wide one.
    """

    def __init__(
        self,
        session_scope: SessionScope | None = None,
        locks: ModeratorLockRegistry | None = None,
    ):
        self.session_scope = session_scope or db.session
        self.locks = locks or get_lock_registry()

    # =========================================================================
    # Public API
    # =========================================================================

    def auto_assign(self, question_id: int) -> AssignmentResult:
        """
        Assign a pending question to the best available moderator.

        Never raises: failures come back with success=False and an error
        code (not_found, invalid_state, no_candidates, persistence_failure,
        lock_timeout).
        """
        with LogContext(question_id=question_id, operation="auto_assign"):
            try:
                result = self._auto_assign(question_id)
            except (QuestionNotFound, InvalidQuestionState) as e:
                logger.info("assignment_rejected", error=e.code, reason=e.message)
                return AssignmentResult.failure(question_id, e, MSG_NOT_PENDING)
            except NoCandidates as e:
                logger.warning("assignment_no_candidates")
                return AssignmentResult.failure(question_id, e)
            except LockTimeout as e:
                logger.warning("assignment_lock_timeout", moderator_id=e.moderator_id, reason=e.message)
                return AssignmentResult.failure(question_id, e)
            except PersistenceFailure as e:
                logger.error("assignment_persistence_failed", error=e.code, reason=e.message)
                return AssignmentResult.failure(question_id, e, MSG_PERSISTENCE)
            except (SQLAlchemyError, RedisError) as e:
                logger.error("assignment_persistence_failed", error=str(e))
                return AssignmentResult.failure(question_id, PersistenceFailure(str(e)), MSG_PERSISTENCE)
            except Exception as e:
                logger.exception("assignment_error", error=str(e), error_type=type(e).__name__)
                return AssignmentResult.unexpected(question_id)

            logger.info(
                "assignment_succeeded",
                moderator_id=result.moderator_id,
                score=result.score,
                skill_match=result.skill_match,
                workload=result.workload,
                fallback=result.fallback,
            )
            return result

    def unassign(self, question_id: int) -> AssignmentResult:
        """
        Force an active question back to pending so it can be re-routed.

        Only assigned or in-progress questions can be unassigned.
        """
        return self._operator_action("unassign", question_id, lambda: self._unassign(question_id))

    def reassign(self, question_id: int) -> AssignmentResult:
        """Unassign an active question and route it again."""
        released = self.unassign(question_id)
        if not released.success:
            return released
        return self.auto_assign(question_id)

    def assign_to(self, question_id: int, moderator_id: int) -> AssignmentResult:
        """
        Assign a question to a named moderator, bypassing scoring.

        The moderator must be approved and verified. Pending and active
        questions can be assigned; answered and closed ones cannot.
        """
        return self._operator_action(
            "assign", question_id, lambda: self._assign_to(question_id, moderator_id)
        )

    def close(self, question_id: int) -> AssignmentResult:
        """Close a question. Its assignee's workload drops accordingly."""
        return self._operator_action("close", question_id, lambda: self._close(question_id))

    # =========================================================================
    # Decision
    # =========================================================================

    def _collect_candidates(self, question_id: int) -> tuple[list[str], bool, list[int]]:
        """
        Read-only pass: validate the question and find candidate ids.

        Returns:
            (suggested skills, fallback flag, candidate moderator ids)
        """
        with self.session_scope() as session:
            question = QuestionRepository(session).get_by_id(question_id)
            if question is None:
                raise QuestionNotFound(question_id)
            if not question.is_pending:
                raise InvalidQuestionState(question_id, question.status)

            skills = list(question.suggested_skills or [])
            users = UserRepository(session)

            candidates = users.find_available_moderators(skills) if skills else []
            fallback = not candidates
            if fallback:
                candidates = users.find_available_moderators()
            if not candidates:
                raise NoCandidates()

            return skills, fallback, [m.id for m in candidates]

    def _auto_assign(self, question_id: int) -> AssignmentResult:
        skills, fallback, candidate_ids = self._collect_candidates(question_id)

        with self.locks.hold(candidate_ids) as locked_ids:
            with self.session_scope() as session:
                questions = QuestionRepository(session)
                question = questions.get_for_update(question_id)
                if question is None:
                    raise QuestionNotFound(question_id)
                if not question.is_pending:
                    raise InvalidQuestionState(question_id, question.status)

                # Re-read inside the critical section; only locked moderators qualify
                users = UserRepository(session)
                locked = set(locked_ids)
                moderators = [
                    m
                    for m in users.find_available_moderators(None if fallback else skills)
                    if m.id in locked
                ]
                if not moderators:
                    raise NoCandidates()

                scorer = CandidateScorer(WorkloadTracker(session))
                best: ScoredCandidate | None
                if fallback:
                    best = scorer.least_busy(moderators)
                else:
                    best = scorer.rank(moderators, skills)[0]
                if best is None:
                    raise NoCandidates()

                questions.assign(question, best.moderator.id)

                result = AssignmentResult(
                    success=True,
                    message=MSG_ASSIGNED_FALLBACK if fallback else MSG_ASSIGNED,
                    question_id=question_id,
                    moderator_id=best.moderator.id,
                    moderator_name=best.moderator.name,
                    score=None if fallback else best.score,
                    skill_match=None if fallback else best.skill_match,
                    workload=best.workload,
                    fallback=fallback,
                )
            # Session committed here, still under the moderator locks

        return result

    # =========================================================================
    # Operator actions
    # =========================================================================

    def _operator_action(
        self, operation: str, question_id: int, action: Callable[[], AssignmentResult]
    ) -> AssignmentResult:
        """Run an operator action, converting every failure into a soft result."""
        with LogContext(question_id=question_id, operation=operation):
            try:
                result = action()
            except RoutingError as e:
                logger.info(f"{operation}_rejected", error=e.code, reason=e.message)
                return AssignmentResult.failure(question_id, e)
            except (SQLAlchemyError, RedisError) as e:
                logger.error(f"{operation}_persistence_failed", error=str(e))
                return AssignmentResult.failure(question_id, PersistenceFailure(str(e)), MSG_PERSISTENCE)
            except Exception as e:
                logger.exception(f"{operation}_error", error=str(e), error_type=type(e).__name__)
                return AssignmentResult.unexpected(question_id, f"Failed to {operation} question")

            logger.info(f"{operation}_succeeded", moderator_id=result.moderator_id)
            return result

    def _current_assignee(self, question_id: int) -> int | None:
        with self.session_scope() as session:
            question = QuestionRepository(session).get_by_id(question_id)
            if question is None:
                raise QuestionNotFound(question_id)
            return question.assigned_to_id

    def _unassign(self, question_id: int) -> AssignmentResult:
        previous = self._current_assignee(question_id)

        # The previous assignee's workload drops; serialize with decisions reading it
        with self.locks.hold([previous] if previous else []):
            with self.session_scope() as session:
                questions = QuestionRepository(session)
                question = questions.get_for_update(question_id)
                if question is None:
                    raise QuestionNotFound(question_id)
                if question.status not in ACTIVE_STATUSES:
                    raise InvalidQuestionState(
                        question_id, question.status, expected="assigned or in-progress"
                    )
                questions.unassign(question)

        return AssignmentResult(
            success=True,
            message=MSG_UNASSIGNED,
            question_id=question_id,
            moderator_id=previous,
        )

    def _assign_to(self, question_id: int, moderator_id: int) -> AssignmentResult:
        previous = self._current_assignee(question_id)

        with self.locks.hold([moderator_id] + ([previous] if previous else [])):
            with self.session_scope() as session:
                questions = QuestionRepository(session)
                question = questions.get_for_update(question_id)
                if question is None:
                    raise QuestionNotFound(question_id)
                if question.status not in (QuestionStatus.PENDING.value, *ACTIVE_STATUSES):
                    raise InvalidQuestionState(
                        question_id, question.status, expected="pending, assigned or in-progress"
                    )
                if question.assigned_to_id not in (previous, moderator_id):
                    # Assignee changed after the pre-read; its lock is not held
                    raise InvalidQuestionState(question_id, question.status, expected="an unchanged assignee")

                moderator = UserRepository(session).get_by_id(moderator_id)
                if moderator is None or not moderator.is_available_moderator:
                    raise InvalidModerator(moderator_id)

                workload = WorkloadTracker(session).current_workload(moderator_id)
                questions.assign(question, moderator_id)
                name = moderator.name

        return AssignmentResult(
            success=True,
            message=MSG_ASSIGNED_MANUAL,
            question_id=question_id,
            moderator_id=moderator_id,
            moderator_name=name,
            workload=workload,
        )

    def _close(self, question_id: int) -> AssignmentResult:
        assignee = self._current_assignee(question_id)

        with self.locks.hold([assignee] if assignee else []):
            with self.session_scope() as session:
                questions = QuestionRepository(session)
                question = questions.get_for_update(question_id)
                if question is None:
                    raise QuestionNotFound(question_id)
                if question.status == QuestionStatus.CLOSED.value:
                    raise InvalidQuestionState(question_id, question.status, expected="not closed")
                if question.assigned_to_id != assignee:
                    raise InvalidQuestionState(question_id, question.status, expected="an unchanged assignee")
                questions.close(question)

        return AssignmentResult(
            success=True,
            message=MSG_CLOSED,
            question_id=question_id,
            moderator_id=assignee,
        )
