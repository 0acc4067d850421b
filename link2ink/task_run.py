# -*- coding: utf-8 -*-
"""
TaskRun - owner of one task's progress state, log window and timers.

A TaskRun is created when a task starts and closed when it ends. The two
repeating timers (progress easing and log simulation) are started by whoever
displays the run (``start_timers``) and stopped when the display goes away
(``stop_timers``). ``close()`` runs in the owning slot's ``finally`` block, so
completion, error and cancellation all release the timers, and a closed run
can never be restarted.

The scheduler has the shape of Textual's ``set_interval(interval, callback)``
so a widget can pass its own ``set_interval``; ``asyncio_interval`` provides
the same shape on a bare asyncio loop.
"""

import asyncio
import random
from datetime import datetime
from typing import Callable, List, Optional, Protocol

from link2ink.categories import TaskCategory, get_profile
from link2ink.log_stream import TICK_INTERVAL as LOG_TICK_INTERVAL
from link2ink.log_stream import DecorativeLogSource, LogSource, LogStream
from link2ink.logger_config import logger
from link2ink.progress import TICK_INTERVAL as PROGRESS_TICK_INTERVAL
from link2ink.progress import ProgressAnimator


class TimerHandle(Protocol):
    def stop(self) -> None:
        ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class _AsyncioTimer:
    """Repeating callback on the running asyncio loop."""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self._interval = interval
        self._callback = callback
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._callback()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


def asyncio_interval(interval: float, callback: Callable[[], None]) -> _AsyncioTimer:
    """Scheduler for code running outside a Textual widget."""
    return _AsyncioTimer(interval, callback)


class TaskRun:
    """Progress, stage message and log window for one in-flight task.

    Args:
        category: Task category; picks the decorative log pool and prefix.
        log_source: Overrides the decorative source (e.g. a real event tap).
        rng: Random source for the decorative log lines.
        clock: Timestamp source for log entries.
    """

    def __init__(
        self,
        category: TaskCategory,
        log_source: Optional[LogSource] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.category = category
        self.profile = get_profile(category)
        self.progress = ProgressAnimator()
        self.logs = LogStream(log_source or DecorativeLogSource(self.profile.log_tasks, rng=rng), clock=clock)
        self.stage_message = ""
        self.closed = False
        self._timers: List[TimerHandle] = []
        self._on_tick: Optional[Callable[[], None]] = None

    def begin(self, opening_message: str = "") -> None:
        """Reset to the baseline and record the opening message.

        The opening message is shown but not classified; only messages that
        arrive through ``on_stage`` move the target.
        """
        self.progress.reset()
        self.stage_message = opening_message or self.profile.opening_stage
        self.logs.seed(f"> initializing {self.profile.log_prefix}_module...")
        self.closed = False

    def on_stage(self, message: str) -> None:
        """Stage callback handed to the generation service."""
        if self.closed:
            logger.debug("[TaskRun:{}] Ignoring stage after close: {}", self.category.value, message)
            return
        self.stage_message = message
        target = self.progress.apply_stage(message)
        logger.debug("[TaskRun:{}] stage={!r} target={}", self.category.value, message, target)
        self._notify()

    def tick_progress(self) -> None:
        if self.closed:
            return
        self.progress.tick()
        self._notify()

    def tick_logs(self) -> None:
        if self.closed:
            return
        if self.logs.tick() is not None:
            self._notify()

    def _notify(self) -> None:
        if self._on_tick is not None:
            self._on_tick()

    @property
    def timers_active(self) -> bool:
        return bool(self._timers)

    def start_timers(self, scheduler: Scheduler, on_tick: Optional[Callable[[], None]] = None) -> bool:
        """Start both repeating timers, replacing any already running.

        Returns False for a closed run, which never ticks again.
        """
        self.stop_timers()
        if self.closed:
            return False
        self._on_tick = on_tick
        self._timers = [
            scheduler(PROGRESS_TICK_INTERVAL, self.tick_progress),
            scheduler(LOG_TICK_INTERVAL, self.tick_logs),
        ]
        return True

    def stop_timers(self) -> None:
        timers, self._timers = self._timers, []
        for timer in timers:
            timer.stop()
        self._on_tick = None

    def close(self) -> None:
        """Stop timers and refuse further state changes."""
        self.stop_timers()
        self.closed = True
