"""Periodic expiry of stale holds."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from shared.application.message_bus import message_bus
from shared.infrastructure.clock import Clock, system_clock

from .application.command_handlers import ExpireStaleHoldsCommand

logger = logging.getLogger(__name__)

Sweep = Callable[[datetime], int]


def dispatch_sweep(now: datetime) -> int:
    return message_bus.handle_command(ExpireStaleHoldsCommand(now=now))


class ExpiryReaper:
    """Runs one bulk expiry sweep per ``interval`` until stopped.

    A failing sweep is logged and the loop carries on; the next tick, or a
    lazy expiry on read, reclaims whatever was missed.
    """

    def __init__(
        self,
        interval: timedelta,
        clock: Clock = system_clock,
        sweep: Sweep = dispatch_sweep,
    ) -> None:
        self.interval = interval
        self.clock = clock
        self.sweep = sweep
        self.runs = 0
        self.failures = 0

    def run_once(self) -> int:
        now = self.clock.now()
        self.runs += 1
        try:
            expired = self.sweep(now)
        except Exception as exc:
            self.failures += 1
            logger.error(f"Expiry sweep at {now.isoformat()} failed: {exc}", exc_info=True)
            return 0
        if expired:
            logger.info(f"Expiry sweep at {now.isoformat()} expired {expired} holds")
        return expired

    def run(self, stop_event: threading.Event, max_runs: Optional[int] = None) -> None:
        """Sweep until ``stop_event`` is set (or ``max_runs`` sweeps have run)."""

        logger.info(f"Expiry reaper started, interval {self.interval.total_seconds()}s")
        while not stop_event.is_set():
            self.run_once()
            if max_runs is not None and self.runs >= max_runs:
                break
            stop_event.wait(self.interval.total_seconds())
        logger.info(f"Expiry reaper stopped after {self.runs} sweeps")
