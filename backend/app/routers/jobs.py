"""
Job management endpoints for the internal scheduler.
"""

from fastapi import APIRouter, HTTPException, status

from ..config import get_settings
from ..scheduler import list_jobs, trigger_job
from ..schemas import JobInfo, JobRunRequest

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _ensure_scheduler_enabled():
    """Abort if internal scheduler is disabled in configuration."""
    if not get_settings().enable_scheduler:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Internal scheduler is disabled",
        )


@router.get("", response_model=list[JobInfo])
def get_jobs():
    """List all scheduled jobs."""
    _ensure_scheduler_enabled()
    return list_jobs()


@router.post("/run")
def run_job(request: JobRunRequest):
    """Manually trigger a scheduled job to run now."""
    _ensure_scheduler_enabled()
    kwargs = {}
    if request.job_id == "scan_stale" and request.hours_threshold is not None:
        kwargs["hours_threshold"] = request.hours_threshold
    try:
        trigger_job(request.job_id, **kwargs)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {"status": "scheduled", "job_id": request.job_id}
