"""Fixed-interval scheduler for the watch cycle.

Each registered :class:`CronJob` runs on its own asyncio task: wait
``period`` seconds, await the handler, repeat. A handler that raises is
logged and counted in its :class:`JobStats`; the schedule keeps going.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sol_watch.metrics.collector import WatcherMetrics

logger = logging.getLogger(__name__)

WATCH_JOB = "watch_wallets"


@dataclass(frozen=True)
class CronJob:
    """Handler coroutine plus its period in seconds."""

    handler: Callable[[], Awaitable[Any]]
    period: float
    name: str = ""


@dataclass
class JobStats:
    """Run history of one job since the manager was created."""

    runs: int = 0
    failures: int = 0
    last_started: float | None = None  # unix time
    last_duration: float | None = None  # seconds

    def as_dict(self) -> dict[str, Any]:
        return {
            "runs": self.runs,
            "failures": self.failures,
            "last_started": self.last_started,
            "last_duration": self.last_duration,
        }


class TaskManager:
    """Owns the background jobs of the process.

    Usage::

        tm = TaskManager(metrics=watcher_metrics)
        tm.register(WATCH_JOB, CronJob(handler=cycle.run_watch_cycle, period=30))
        await tm.start()
        ...
        await tm.stop()
    """

    def __init__(self, *, metrics: WatcherMetrics | None = None) -> None:
        self._metrics = metrics
        self._jobs: dict[str, CronJob] = {}
        self._stats: dict[str, JobStats] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def jobs(self) -> dict[str, CronJob]:
        """Copy of the registered jobs keyed by name."""
        return dict(self._jobs)

    def stats(self, name: str) -> JobStats:
        """Run history of job *name*.

        Raises:
            KeyError: No job of that name is registered.
        """
        return self._stats[name]

    def register(self, name: str, job: CronJob) -> None:
        """Add *job* under *name*, replacing any job of the same name.

        A job registered on a running manager is scheduled right away.
        """
        named = CronJob(handler=job.handler, period=job.period, name=name)
        self._jobs[name] = named
        self._stats.setdefault(name, JobStats())
        if self._running:
            self._spawn(named)

    async def start(self) -> None:
        """Schedule every registered job. Calling it twice is a no-op."""
        if self._running:
            return
        self._running = True
        for job in self._jobs.values():
            self._spawn(job)
        logger.info("Scheduler started: %s", ", ".join(self._jobs) or "no jobs")

    async def stop(self) -> None:
        """Cancel all job tasks and wait for them to unwind."""
        if not self._running:
            return
        self._running = False
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for outcome in await asyncio.gather(*tasks, return_exceptions=True):
            if isinstance(outcome, Exception):
                logger.error("Job ended with an error during shutdown: %s", outcome)
        logger.info("Scheduler stopped")

    async def run_now(self, name: str) -> Any:
        """Run job *name* once, outside its schedule, and return its result.

        Raises:
            KeyError: No job of that name is registered.
        """
        return await self._execute(self._jobs[name])

    def _spawn(self, job: CronJob) -> None:
        previous = self._tasks.pop(job.name, None)
        if previous is not None:
            previous.cancel()
        self._tasks[job.name] = asyncio.create_task(self._loop(job), name=f"cron:{job.name}")

    async def _loop(self, job: CronJob) -> None:
        while self._running:
            await asyncio.sleep(job.period)
            if not self._running:
                return
            try:
                await self._execute(job)
            except Exception:
                logger.exception("Job %r failed", job.name)

    async def _execute(self, job: CronJob) -> Any:
        stats = self._stats.setdefault(job.name, JobStats())
        stats.runs += 1
        stats.last_started = time.time()
        started = time.monotonic()
        try:
            if self._metrics:
                with self._metrics.track_cron(job.name):
                    return await job.handler()
            return await job.handler()
        except Exception:
            stats.failures += 1
            raise
        finally:
            stats.last_duration = time.monotonic() - started
