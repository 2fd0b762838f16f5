"""Scheduler backed by ``threading.Timer``."""

from __future__ import annotations

import threading
from typing import Callable

from shopcart.application.scheduler import ScheduledTask, Scheduler


class TimerTask(ScheduledTask):

    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class TimerScheduler(Scheduler):
    """Runs callbacks on daemon timer threads so pending notice expiries
    never keep the process alive."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return TimerTask(timer)
