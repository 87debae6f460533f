"""Scheduled expiry and low-stock reminders."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from .client import PantryAPI
from .config import PantryConfig
from .engine import expiring_soon, low_stock
from .session import SessionContext

logger = logging.getLogger(__name__)


def _default_api_factory(config: PantryConfig) -> PantryAPI:
    return PantryAPI(
        config.api.base_url,
        session=SessionContext.from_config(config),
        timeout=config.api.timeout,
    )


class ReminderScheduler:
    """Posts pantry reminders to the notifications feed on a cron schedule.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(
        self,
        config: PantryConfig,
        api_factory: Callable[[PantryConfig], PantryAPI] | None = None,
    ) -> None:
        """Initialize scheduler with a PantryConfig.

        Args:
            config: PantryConfig instance.
            api_factory: Builds the API client for each job run.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'pantrypal[scheduler]'"
            )

        self._config = config
        self._api_factory = api_factory or _default_api_factory
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        schedule = self._config.reminders.schedule

        trigger = self._parse_cron(schedule)
        self._scheduler.add_job(
            self._job_expiry_reminder,
            trigger=trigger,
            id="expiry_reminder",
            name="Expiring item reminder",
            replace_existing=True,
        )
        logger.info("Registered expiry reminder: %s", schedule)

        if self._config.reminders.low_stock:
            trigger = self._parse_cron(schedule)
            self._scheduler.add_job(
                self._job_low_stock_reminder,
                trigger=trigger,
                id="low_stock_reminder",
                name="Low stock reminder",
                replace_existing=True,
            )
            logger.info("Registered low stock reminder: %s", schedule)

    def start(self) -> None:
        """Start the scheduler."""
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"invalid cron expression: {expr!r}")

    async def _job_expiry_reminder(self, today: date | None = None) -> int:
        """Post one notification per item expiring within the window."""
        logger.info("Running expiry reminder...")
        posted = 0
        try:
            async with self._api_factory(self._config) as api:
                pantry = await api.get_pantry()
                expiring = expiring_soon(
                    pantry,
                    today or date.today(),
                    window_days=self._config.pantry.expiring_days,
                )
                for entry in expiring:
                    await api.create_notification(
                        f"{entry.item.name} {entry.label}"
                    )
                    posted += 1
            if posted:
                logger.info("Posted %d expiry reminders", posted)
        except Exception:
            logger.exception("Expiry reminder job failed")
        return posted

    async def _job_low_stock_reminder(self) -> int:
        """Post one notification per low-stock item not yet on the list."""
        logger.info("Running low stock reminder...")
        posted = 0
        try:
            async with self._api_factory(self._config) as api:
                pantry = await api.get_pantry()
                _, grocery = await api.get_grocery()
                for item in low_stock(pantry, grocery):
                    left = f"{item.quantity:g} {item.unit}".strip()
                    await api.create_notification(
                        f"{item.name} is running low ({left} left)"
                    )
                    posted += 1
            if posted:
                logger.info("Posted %d low stock reminders", posted)
        except Exception:
            logger.exception("Low stock reminder job failed")
        return posted
