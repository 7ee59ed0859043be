from __future__ import annotations

import signal
import threading
from datetime import datetime, timedelta

from django.core.management.base import BaseCommand  # type: ignore
from django.db import close_old_connections  # type: ignore

from apps.reservations.conf import ReservationSettings
from apps.reservations.reaper import ExpiryReaper, dispatch_sweep


def _sweep(now: datetime) -> int:
    close_old_connections()
    return dispatch_sweep(now)


class Command(BaseCommand):
    help = "Runs the hold expiry reaper in the foreground until SIGINT/SIGTERM"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument(
            "--interval",
            type=float,
            default=None,
            help="Seconds between sweeps (defaults to RESERVATION_REAPER_INTERVAL_SECONDS)",
        )
        parser.add_argument("--once", action="store_true", help="Run a single sweep and exit")

    def handle(self, *args, **options):  # type: ignore
        interval = ReservationSettings.from_django().reaper_interval
        if options["interval"] is not None:
            interval = timedelta(seconds=options["interval"])

        if options["once"]:
            reaper = ExpiryReaper(interval=interval)
            expired = reaper.run_once()
            self.stdout.write(f"Expired {expired} holds")
            return

        reaper = ExpiryReaper(interval=interval, sweep=_sweep)
        stop_event = threading.Event()

        def _stop(signum, frame):
            stop_event.set()

        signal.signal(signal.SIGINT, _stop)
        signal.signal(signal.SIGTERM, _stop)

        self.stdout.write(f"Reaper running every {interval.total_seconds()}s")
        reaper.run(stop_event)
        self.stdout.write(f"Reaper stopped after {reaper.runs} sweeps ({reaper.failures} failed)")
