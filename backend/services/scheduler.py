"""
Scheduled housekeeping
Sweeps expired rate limit records once per window so the map only holds active clients
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


def start_scheduler(limiter: RateLimiter, target: Optional[AsyncIOScheduler] = None):
    """Start the APScheduler (the global one unless `target` is given) with the rate limit sweep job"""
    if target is None:
        target = scheduler
    target.add_job(
        limiter.sweep,
        IntervalTrigger(seconds=limiter.window_seconds),
        id="rate_limit_sweep",
        name="Rate limit sweep",
        replace_existing=True
    )

    target.start()
    logger.info(f"Scheduler started - rate limit sweep every {limiter.window_seconds}s")


def stop_scheduler(target: Optional[AsyncIOScheduler] = None):
    """Stop the scheduler"""
    if target is None:
        target = scheduler
    if target.running:
        target.shutdown()
        logger.info("Scheduler stopped")


def get_scheduler_status():
    """Get status of scheduled jobs"""
    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            "trigger": str(job.trigger)
        })
    return {
        "running": scheduler.running,
        "jobs": jobs
    }
