"""
Scheduler initialization and management.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import get_settings
from . import jobs

logger = logging.getLogger("backend.scheduler")

JOB_DEFINITIONS = {
    "process_pending": {
        "func": jobs.run_process_pending_job,
        "description": "Auto-assign every pending question",
    },
    "scan_stale": {
        "func": jobs.run_stale_scan_job,
        "description": "Report assigned questions idle past the stale threshold",
    },
}

_scheduler: AsyncIOScheduler | None = None


def _build_scheduler() -> AsyncIOScheduler:
    settings = get_settings()
    jobstores = {
        "default": SQLAlchemyJobStore(url=settings.database_url),
    }
    return AsyncIOScheduler(jobstores=jobstores, timezone="UTC")


def get_scheduler() -> AsyncIOScheduler:
    """Scheduler built on first use, so importing the app opens no job store."""
    global _scheduler
    if _scheduler is None:
        _scheduler = _build_scheduler()
    return _scheduler


def _cron(trigger_str: str) -> CronTrigger:
    return CronTrigger.from_crontab(trigger_str, timezone="UTC")


def schedule_default_jobs() -> None:
    settings = get_settings()
    scheduler = get_scheduler()
    scheduler.add_job(
        jobs.run_process_pending_job,
        _cron(settings.scheduler_process_pending_cron),
        id="process_pending",
        replace_existing=True,
        misfire_grace_time=300,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        jobs.run_stale_scan_job,
        _cron(settings.scheduler_stale_scan_cron),
        id="scan_stale",
        replace_existing=True,
        misfire_grace_time=600,
        coalesce=True,
    )


def start_scheduler() -> None:
    scheduler = get_scheduler()
    if scheduler.running:
        return
    schedule_default_jobs()
    scheduler.start()
    logger.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))


def shutdown_scheduler() -> None:
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown()
        logger.info("Scheduler shut down")


def list_jobs() -> list[dict[str, Any]]:
    items = []
    for job in get_scheduler().get_jobs():
        items.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger),
                "description": JOB_DEFINITIONS.get(job.id, {}).get("description"),
            }
        )
    return items


def trigger_job(job_id: str, **kwargs) -> None:
    job_def = JOB_DEFINITIONS.get(job_id)
    if not job_def:
        raise ValueError(f"Unknown job_id: {job_id}")
    get_scheduler().add_job(
        job_def["func"],
        "date",
        run_date=datetime.now(timezone.utc),
        kwargs=kwargs,
    )


__all__ = [
    "JOB_DEFINITIONS",
    "get_scheduler",
    "list_jobs",
    "schedule_default_jobs",
    "shutdown_scheduler",
    "start_scheduler",
    "trigger_job",
]
