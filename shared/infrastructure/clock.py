"""Clock abstraction so time-dependent code can be driven from tests."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from django.utils import timezone  # type: ignore


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Timezone-aware wall clock backed by ``django.utils.timezone``."""

    def now(self) -> datetime:
        return timezone.now()


system_clock = SystemClock()
