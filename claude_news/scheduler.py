"""
Refresh scheduling with a single-flight guard.

Two cron triggers (every N hours on the clock, and daily at a fixed hour)
and manual triggers all go through ``run_cycle``. While a cycle is running,
further calls are rejected immediately instead of being queued.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import SchedulerConfig
from .core.types import ConcurrentRefreshRejected, RefreshResult, SchedulerStatus
from .logging_utils import log_event


logger = logging.getLogger(__name__)

Cycle = Callable[[], Awaitable[RefreshResult]]

_JOB_INTERVAL = "refresh-interval"
_JOB_DAILY = "refresh-daily"


class RefreshScheduler:
    """Owns the periodic triggers and the idle/fetching state.

    Must be started from inside a running asyncio event loop.
    """

    def __init__(self, cycle: Cycle, cfg: SchedulerConfig | None = None):
        self._cycle = cycle
        self.cfg = cfg or SchedulerConfig()
        self._scheduler: AsyncIOScheduler | None = None
        self._fetching = False

    @property
    def fetching(self) -> bool:
        return self._fetching

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def start(self) -> None:
        """Arm both periodic triggers. No-op if already armed."""
        if self._scheduler is not None:
            logger.info("Scheduler already running")
            return

        kwargs = {"timezone": self.cfg.timezone} if self.cfg.timezone else {}
        scheduler = AsyncIOScheduler(**kwargs)
        scheduler.add_job(
            self._scheduled_run,
            CronTrigger(hour=f"*/{self.cfg.interval_hours}", minute=0, **kwargs),
            id=_JOB_INTERVAL,
            coalesce=True,
            max_instances=1,
        )
        scheduler.add_job(
            self._scheduled_run,
            CronTrigger(hour=self.cfg.daily_hour, minute=0, **kwargs),
            id=_JOB_DAILY,
            coalesce=True,
            max_instances=1,
        )
        scheduler.start()
        self._scheduler = scheduler
        log_event(
            logger,
            f"Scheduler started - will fetch news every {self.cfg.interval_hours} hours",
            event="scheduler_started",
            interval_hours=self.cfg.interval_hours,
            daily_hour=self.cfg.daily_hour,
        )

    def stop(self) -> None:
        """Disarm both triggers. Does not interrupt a running cycle."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        log_event(logger, "Scheduler stopped", event="scheduler_stopped")

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            running=self.running,
            fetching=self._fetching,
            next_run=self.next_run_time(),
        )

    def next_run_time(self) -> datetime | None:
        if self._scheduler is None:
            return None
        times = [
            job.next_run_time
            for job in self._scheduler.get_jobs()
            if getattr(job, "next_run_time", None) is not None
        ]
        return min(times) if times else None

    async def run_cycle(self) -> RefreshResult | ConcurrentRefreshRejected:
        """Run one ingestion cycle unless one is already in flight.

        The check and the state change happen without an intervening await,
        so concurrent callers on the same loop cannot both get through.
        """
        if self._fetching:
            rejected = ConcurrentRefreshRejected()
            log_event(
                logger,
                "Fetch already in progress, skipping...",
                event="refresh_rejected",
            )
            return rejected

        self._fetching = True
        try:
            return await self._cycle()
        finally:
            self._fetching = False

    async def _scheduled_run(self) -> None:
        logger.info("Running scheduled news fetch...")
        try:
            await self.run_cycle()
        except Exception:  # noqa: BLE001
            logger.exception("Scheduled fetch failed")
