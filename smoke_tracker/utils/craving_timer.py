"""Countdown that rides out a craving and records it exactly once.

The tracker engine has no notion of timers: this lives with the bot and only
hands the finished episode to a callback.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Awaitable, Callable

from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)

# (was_successful, started_at, duration_seconds)
FinishCallback = Callable[[bool, dt.datetime, float], Awaitable[None]]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class CravingTimer:
    def __init__(
        self,
        scheduler: BaseScheduler,
        job_id: str,
        seconds: int,
        on_finish: FinishCallback,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._scheduler = scheduler
        self._job_id = job_id
        self._on_finish = on_finish
        self._clock = clock
        self.remaining = seconds
        self.started_at: dt.datetime | None = None
        self.finished = False

    def start(self) -> None:
        self.started_at = self._clock()
        self._scheduler.add_job(self.tick, "interval", seconds=1, id=self._job_id, replace_existing=True)
        logger.debug("Craving timer %s started (%ss)", self._job_id, self.remaining)

    async def tick(self) -> None:
        if self.finished:
            return
        if self.remaining > 0:
            self.remaining -= 1
        else:
            await self._finish(True)

    async def stop(self, successful: bool = False) -> None:
        """Manual stop; by default the user gave in to the craving."""
        await self._finish(successful)

    async def _finish(self, successful: bool) -> None:
        if self.finished:
            return
        self.finished = True
        if self._scheduler.get_job(self._job_id) is not None:
            self._scheduler.remove_job(self._job_id)

        started = self.started_at or self._clock()
        duration = max((self._clock() - started).total_seconds(), 0.0)
        logger.debug("Craving timer %s finished, successful=%s", self._job_id, successful)
        await self._on_finish(successful, started, duration)
