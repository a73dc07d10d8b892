"""Task manager — fixed-interval scheduling of the watch cycle.

The engine registers ``WatchCycle.run_watch_cycle`` as the
``watch_wallets`` job.
"""

from __future__ import annotations

from sol_watch.taskmanager.manager import WATCH_JOB, CronJob, JobStats, TaskManager

__all__ = ["WATCH_JOB", "CronJob", "JobStats", "TaskManager"]
