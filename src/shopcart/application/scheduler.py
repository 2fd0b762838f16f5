"""Port for deferred callbacks.

The CartManager uses it to expire notices. Concrete schedulers live
in the infrastructure layer; tests use a fake that fires on demand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class ScheduledTask(ABC):

    @abstractmethod
    def cancel(self) -> None:
        """Stop the callback from running. Safe to call more than once."""


class Scheduler(ABC):

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run *callback* once after *delay* seconds."""
