"""
Routing endpoints: assignment, operator actions, batch sweep, staleness and statistics.

Routing failures are soft: they come back with HTTP 200 and success=false.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from qa_routing.routing import AssignmentEngine, find_stale, process_pending, routing_stats

from ..config import get_settings
from ..database import get_db
from ..dependencies import get_assignment_engine
from ..schemas import (
    AssignmentResultResponse,
    ManualAssignRequest,
    ProcessPendingResponse,
    RoutingStatsResponse,
    StaleQuestionsResponse,
)

router = APIRouter(prefix="/routing", tags=["routing"])


@router.post("/auto-assign/{question_id}", response_model=AssignmentResultResponse)
def auto_assign(question_id: int, engine: AssignmentEngine = Depends(get_assignment_engine)):
    """Assign one pending question to the best available moderator."""
    return engine.auto_assign(question_id).to_dict()


@router.post("/unassign/{question_id}", response_model=AssignmentResultResponse)
def unassign(question_id: int, engine: AssignmentEngine = Depends(get_assignment_engine)):
    """Return an assigned or in-progress question to the pending pool."""
    return engine.unassign(question_id).to_dict()


@router.post("/reassign/{question_id}", response_model=AssignmentResultResponse)
def reassign(question_id: int, engine: AssignmentEngine = Depends(get_assignment_engine)):
    """Unassign an active question and route it again."""
    return engine.reassign(question_id).to_dict()


@router.post("/assign/{question_id}", response_model=AssignmentResultResponse)
def assign_to_moderator(
    question_id: int,
    payload: ManualAssignRequest,
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Assign a question to a named, approved and verified moderator."""
    return engine.assign_to(question_id, payload.moderator_id).to_dict()


@router.post("/close/{question_id}", response_model=AssignmentResultResponse)
def close_question(question_id: int, engine: AssignmentEngine = Depends(get_assignment_engine)):
    """Close a question, releasing its moderator's workload."""
    return engine.close(question_id).to_dict()


@router.post("/process-pending", response_model=ProcessPendingResponse)
def run_process_pending(
    limit: int | None = Query(default=None, ge=1, le=1000),
    engine: AssignmentEngine = Depends(get_assignment_engine),
):
    """Auto-assign every pending question, urgent and oldest first."""
    return process_pending(engine, limit=limit).to_dict()


@router.get("/stale", response_model=StaleQuestionsResponse)
def stale_questions(
    hours_threshold: float | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """List assigned or in-progress questions idle for longer than the threshold."""
    hours = get_settings().stale_hours_default if hours_threshold is None else hours_threshold
    try:
        stale = find_stale(db, hours_threshold=hours)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return StaleQuestionsResponse(
        hours_threshold=hours,
        count=len(stale),
        questions=[s.to_dict() for s in stale],
    )


@router.get("/stats", response_model=RoutingStatsResponse)
def stats(db: Session = Depends(get_db)):
    """Question counts by status and per-moderator workload."""
    return RoutingStatsResponse(stats=routing_stats(db).to_dict())
