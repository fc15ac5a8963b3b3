import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from lms_admin.commands import RELEASE_COMMISSIONS, release_commissions
from lms_admin.config import get_settings

logger = logging.getLogger(__name__)


def build_scheduler() -> AsyncIOScheduler:
    """
    Scheduler holding the recurring console commands.

    Only ``affiliate:release-commissions`` runs, daily at midnight. Demo data
    cleanup is not scheduled.
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler(
        timezone=settings.scheduler_timezone,
        job_defaults={
            'coalesce': True,
            'max_instances': 1
        }
    )

    scheduler.add_job(
        func=release_commissions,
        trigger=CronTrigger(hour=0, minute=0, timezone=settings.scheduler_timezone),
        id=RELEASE_COMMISSIONS,
        name='Release affiliate commissions',
        replace_existing=True
    )
    return scheduler


async def run_scheduler():
    """Start the scheduler and block until cancelled"""
    scheduler = build_scheduler()
    scheduler.start()
    logger.info(f"Scheduler started with jobs: {[job.id for job in scheduler.get_jobs()]}")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
