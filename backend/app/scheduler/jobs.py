"""
Background job functions for the internal scheduler.

Includes:
- Pending sweep (auto-assign every pending question)
- Stale scan (report active questions idle past the threshold)
"""

from __future__ import annotations

import logging
from typing import Optional

from qa_routing.routing import AssignmentEngine, find_stale, process_pending

from ..config import get_settings
from ..database import db

logger = logging.getLogger("backend.scheduler.jobs")


def _ensure_db() -> None:
    if not db.is_initialized:
        db.initialize()


def run_process_pending_job(limit: Optional[int] = None) -> None:
    _ensure_db()
    batch = process_pending(AssignmentEngine(), limit=limit)
    if not batch.success:
        logger.error("Pending sweep failed: %s", batch.error)
        return
    logger.info(
        "Pending sweep processed %d questions (%d assigned)",
        batch.processed,
        batch.assigned,
    )


def run_stale_scan_job(hours_threshold: Optional[float] = None) -> None:
    _ensure_db()
    hours = get_settings().stale_hours_default if hours_threshold is None else hours_threshold
    with db.session() as session:
        stale = find_stale(session, hours_threshold=hours)

    for question in stale:
        assignee = question.assigned_to["id"] if question.assigned_to else None
        logger.warning(
            "Question %s idle for %d hours (status=%s, moderator=%s)",
            question.id,
            question.hours_since_update,
            question.status,
            assignee,
        )
    logger.info("Stale scan found %d questions older than %s hours", len(stale), hours)
