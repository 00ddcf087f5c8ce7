import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional

import structlog

from ..config import Settings
from .runner import CLEANUP, FETCH_FEEDS, run_cleanup_job, run_fetch_job

logger = structlog.get_logger(__name__)

Job = Callable[[], Awaitable[object]]


def seconds_until_hour(hour: int, now: Optional[datetime] = None) -> float:
    """Seconds from ``now`` until the next HH:00 UTC"""
    now = now or datetime.now(timezone.utc)
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class JobScheduler:
    """
    In-process schedule for deployments without an external scheduler.

    Each job loop awaits its run before sleeping again, so a slow run delays
    the next one instead of overlapping it. Nothing stops a second process
    from running the same job at the same time.
    """

    def __init__(
        self,
        settings: Settings,
        fetch_job: Job = run_fetch_job,
        cleanup_job: Job = run_cleanup_job,
    ):
        self.settings = settings
        self.fetch_job = fetch_job
        self.cleanup_job = cleanup_job
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        fetch_interval = self.settings.fetch_interval_minutes * 60
        self._tasks = [
            asyncio.create_task(self._loop(FETCH_FEEDS, self.fetch_job, lambda: fetch_interval)),
            asyncio.create_task(
                self._loop(CLEANUP, self.cleanup_job, lambda: seconds_until_hour(self.settings.cleanup_hour_utc))
            ),
        ]
        logger.info(
            "Job scheduler started",
            fetch_interval_minutes=self.settings.fetch_interval_minutes,
            cleanup_hour_utc=self.settings.cleanup_hour_utc,
        )

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Job scheduler stopped")

    async def _loop(self, name: str, job: Job, next_delay: Callable[[], float]) -> None:
        while True:
            await asyncio.sleep(next_delay())
            logger.info("Running scheduled job", job=name)
            try:
                await job()
            except Exception as e:
                logger.error("Scheduled job crashed", job=name, error=str(e), exc_info=e)
