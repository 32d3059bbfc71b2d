"""
In-process job scheduling with APScheduler.

The only job is the daily food status refresh. Deployments that run several
API workers should disable this (SCHEDULER_ENABLED=false) and call
/api/cron/refresh-statuses from system crontab instead.
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from wastewise.jobs.status_refresh import refresh_food_statuses
from wastewise.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

STATUS_REFRESH_JOB = "refresh_food_statuses"

scheduler = AsyncIOScheduler()


def start_scheduler():
    scheduler.add_job(
        refresh_food_statuses,
        CronTrigger(hour=settings.status_refresh_hour, minute=0),
        id=STATUS_REFRESH_JOB,
        name="Recompute stored food item statuses",
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=3600,
    )
    scheduler.start()

    job = scheduler.get_job(STATUS_REFRESH_JOB)
    logger.info(f"Scheduler started; status refresh next runs at {job.next_run_time if job else 'never'}")


def shutdown_scheduler():
    """Stop the scheduler without waiting for a running refresh."""
    if not scheduler.running:
        return
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shutdown")


def get_scheduler() -> AsyncIOScheduler:
    return scheduler
