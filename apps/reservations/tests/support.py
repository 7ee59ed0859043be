"""Helpers shared by the reservation tests."""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone

from apps.fleet.models import Vehicle
from apps.reservations.application.command_handlers import (
    CancelByBookingHandler,
    CancelReservationHandler,
    CheckAvailabilityHandler,
    ConfirmReservationHandler,
    CreateHoldHandler,
    ExpireStaleHoldsHandler,
    GetReservationHandler,
)
from apps.reservations.conf import ReservationSettings

UTC = dt_timezone.utc

# The test clock starts the day before the booked period.
START = datetime(2024, 12, 31, 12, 0, tzinfo=UTC)
JAN1 = datetime(2025, 1, 1, tzinfo=UTC)
JAN4 = datetime(2025, 1, 4, tzinfo=UTC)
JAN5 = datetime(2025, 1, 5, tzinfo=UTC)
JAN8 = datetime(2025, 1, 8, tzinfo=UTC)

_plates = itertools.count(1)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now += timedelta(**kwargs)
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now


def make_vehicle(model_id, mileage_km: int = 0, status=Vehicle.OperationalStatus.AVAILABLE, **kwargs) -> Vehicle:
    return Vehicle.objects.create(
        model_id=model_id,
        license_plate=kwargs.pop("license_plate", f"TST{next(_plates):05d}"),
        mileage_km=mileage_km,
        status=status,
        **kwargs,
    )


class Handlers:
    """Every reservation handler bound to one clock and one set of tunables."""

    def __init__(self, clock: FakeClock | None = None, hold_seconds: int = 300, max_span_days: int = 30):
        self.clock = clock or FakeClock()
        self.settings = ReservationSettings(
            hold_duration=timedelta(seconds=hold_seconds),
            max_span=timedelta(days=max_span_days),
        )
        kwargs = {"clock": self.clock, "settings": self.settings}
        self.create_hold = CreateHoldHandler(**kwargs).handle
        self.confirm = ConfirmReservationHandler(**kwargs).handle
        self.cancel = CancelReservationHandler(**kwargs).handle
        self.cancel_by_booking = CancelByBookingHandler(**kwargs).handle
        self.expire_stale = ExpireStaleHoldsHandler(**kwargs).handle
        self.check_availability = CheckAvailabilityHandler(**kwargs).handle
        self.get = GetReservationHandler(**kwargs).handle


def new_model_id() -> uuid.UUID:
    return uuid.uuid4()
