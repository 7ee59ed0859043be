"""Tunables of the reservation core, read once from Django settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings  # type: ignore

DEFAULT_HOLD_SECONDS = 300
DEFAULT_MAX_SPAN_DAYS = 30
DEFAULT_REAPER_INTERVAL_SECONDS = 10
DEFAULT_TRANSACTION_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class ReservationSettings:
    hold_duration: timedelta = timedelta(seconds=DEFAULT_HOLD_SECONDS)
    max_span: timedelta = timedelta(days=DEFAULT_MAX_SPAN_DAYS)
    reaper_interval: timedelta = timedelta(seconds=DEFAULT_REAPER_INTERVAL_SECONDS)
    transaction_timeout: timedelta = timedelta(seconds=DEFAULT_TRANSACTION_TIMEOUT_SECONDS)

    @classmethod
    def from_django(cls) -> "ReservationSettings":
        return cls(
            hold_duration=timedelta(
                seconds=int(getattr(settings, "RESERVATION_HOLD_SECONDS", DEFAULT_HOLD_SECONDS))
            ),
            max_span=timedelta(
                days=int(getattr(settings, "RESERVATION_MAX_SPAN_DAYS", DEFAULT_MAX_SPAN_DAYS))
            ),
            reaper_interval=timedelta(
                seconds=float(
                    getattr(settings, "RESERVATION_REAPER_INTERVAL_SECONDS", DEFAULT_REAPER_INTERVAL_SECONDS)
                )
            ),
            transaction_timeout=timedelta(
                seconds=float(
                    getattr(
                        settings,
                        "RESERVATION_TRANSACTION_TIMEOUT_SECONDS",
                        DEFAULT_TRANSACTION_TIMEOUT_SECONDS,
                    )
                )
            ),
        )
