"""
Recurring task scheduling.

``Scheduler`` is the capability the cache needs from whatever runs its
periodic cleanup. ``IntervalScheduler`` is a tick-driven in-process
implementation: something external (a cron request, a worker loop) calls
``run_pending``. In deployment the dagster schedule in
``dagster_home/definitions.py`` plays this role.
"""
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

HOURLY = 3600
CLEANUP_TASK_NAME = "feedcache_cache_cleanup"


class Scheduler(ABC):
    """Registers named recurring tasks, at most once per name."""

    @abstractmethod
    def is_scheduled(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def schedule(self, name: str, interval_seconds: int, task: Callable[[], object]) -> bool:
        """Register ``task``. Returns False if ``name`` is already scheduled."""
        raise NotImplementedError

    @abstractmethod
    def unschedule(self, name: str) -> bool:
        raise NotImplementedError


@dataclass
class ScheduledTask:
    name: str
    interval_seconds: int
    task: Callable[[], object]
    next_run: float


class IntervalScheduler(Scheduler):
    """
    In-process scheduler driven by explicit ticks.

    A newly scheduled task is due on the next tick; after each run it is due
    again ``interval_seconds`` later.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._tasks: Dict[str, ScheduledTask] = {}

    def is_scheduled(self, name: str) -> bool:
        return name in self._tasks

    def schedule(self, name: str, interval_seconds: int, task: Callable[[], object]) -> bool:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if name in self._tasks:
            return False
        self._tasks[name] = ScheduledTask(name, interval_seconds, task, next_run=self._clock())
        logger.info(f"Scheduled '{name}' every {interval_seconds}s")
        return True

    def unschedule(self, name: str) -> bool:
        return self._tasks.pop(name, None) is not None

    def next_run(self, name: str) -> Optional[float]:
        task = self._tasks.get(name)
        return task.next_run if task else None

    def run_pending(self, now: Optional[float] = None) -> int:
        """
        Run every due task once.

        Returns:
            Number of tasks run (including ones that raised)
        """
        now = self._clock() if now is None else now
        ran = 0
        for scheduled in list(self._tasks.values()):
            if scheduled.next_run > now:
                continue
            try:
                scheduled.task()
            except Exception:
                logger.exception(f"Scheduled task '{scheduled.name}' failed")
            finally:
                scheduled.next_run = now + scheduled.interval_seconds
                ran += 1
        return ran
