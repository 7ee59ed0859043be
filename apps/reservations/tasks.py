"""Celery tasks for the reservation core."""

from __future__ import annotations

from celery import shared_task  # type: ignore

from .conf import ReservationSettings
from .reaper import ExpiryReaper


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="reservations.expire_stale_holds")
def expire_stale_holds() -> dict[str, int]:
    """
    Expire PENDING holds whose deadline has passed.

    One reaper tick; a failed sweep is logged and picked up by the next run.

    Returns:
        dict: {"expired": number of holds moved to EXPIRED}
    """
    reaper = ExpiryReaper(interval=ReservationSettings.from_django().reaper_interval)
    return {"expired": reaper.run_once()}
