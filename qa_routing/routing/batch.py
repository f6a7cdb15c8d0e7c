"""
Batch processor: sweep every pending question through the assignment engine.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from qa_routing.logging import get_logger, log_timing
from qa_routing.repositories import QuestionRepository

from .engine import AssignmentEngine

logger = get_logger("routing.batch")


@dataclass
class BatchResult:
    """Per-question outcomes of one pending sweep."""

    success: bool = True
    processed: int = 0
    results: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def assigned(self) -> int:
        return sum(1 for r in self.results if r.get("success"))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "processed": self.processed,
            "results": self.results,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@log_timing("process_pending", logger)
def process_pending(engine: AssignmentEngine, limit: int | None = None) -> BatchResult:
    """
    Auto-assign every pending question, urgent and oldest first.

    Questions are processed one at a time so each decision sees the
    workload written by the previous one. A failed question is recorded
    and the sweep continues.

    Args:
        engine: Assignment engine (also supplies the session scope)
        limit: Optional cap on questions handled in this sweep

    Returns:
        BatchResult with one entry per question, each carrying its title
    """
    try:
        with engine.session_scope() as session:
            pending = [(q.id, q.title) for q in QuestionRepository(session).list_pending(limit)]
    except SQLAlchemyError as e:
        logger.error("batch_load_failed", error=str(e))
        return BatchResult(success=False, error="Failed to load pending questions")

    batch = BatchResult()
    for question_id, title in pending:
        result = engine.auto_assign(question_id)
        batch.results.append({"title": title, **result.to_dict()})
        batch.processed += 1

    logger.info(
        "batch_processed",
        processed=batch.processed,
        assigned=batch.assigned,
        failed=batch.processed - batch.assigned,
    )
    return batch


__all__ = ["BatchResult", "process_pending"]
