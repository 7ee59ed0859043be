"""Domain services for vehicle allocation and hold expiry."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from django.db import connections, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.fleet.models import Vehicle
from shared.domain.value_objects import TimeRange

from .exceptions import InvalidDateRange
from .models import BookingRecord

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def _lock_queryset_if_possible(queryset, *, skip_locked: bool = False):
    """Apply select_for_update when inside transaction.atomic() on a backend with row locks."""

    connection = connections[queryset.db]
    if not connection.in_atomic_block or not connection.features.has_select_for_update:
        return queryset
    if skip_locked and not connection.features.has_select_for_update_skip_locked:
        return queryset.select_for_update()
    return queryset.select_for_update(skip_locked=skip_locked)


def validate_interval(
    start: datetime,
    end: datetime,
    *,
    now: datetime,
    max_span: timedelta,
) -> tuple[datetime, datetime]:
    """Check a requested interval before any lock is taken.

    Returns the interval with naive values made aware in the current time
    zone. A span of exactly ``max_span`` is accepted.
    """

    if start is None or end is None:
        raise InvalidDateRange("interval_start and interval_end are required")

    start, end = _aware(start), _aware(end)
    details = {"interval_start": start.isoformat(), "interval_end": end.isoformat()}

    if end <= start:
        raise InvalidDateRange("interval_end must be after interval_start", **details)
    period = TimeRange(start, end)
    if start < now:
        raise InvalidDateRange("interval_start cannot be in the past", now=now.isoformat(), **details)
    if period.duration > max_span:
        raise InvalidDateRange(
            f"Booking span cannot exceed {max_span.days} days",
            max_span_days=max_span.days,
            **details,
        )
    return start, end


def blocked_vehicle_ids(start: datetime, end: datetime, *, now: datetime):
    """Vehicles with a CONFIRMED or live PENDING record overlapping [start, end)."""

    return BookingRecord.objects.blocking(now).overlapping(start, end).values("vehicle_id")


def eligible_vehicles(model_id, start: datetime, end: datetime, *, now: datetime):
    return (
        Vehicle.objects.for_model(model_id)
        .available()
        .exclude(pk__in=blocked_vehicle_ids(start, end, now=now))
        .allocation_order()
    )


def count_available(model_id, start: datetime, end: datetime, *, now: datetime) -> int:
    """Advisory count, stale as soon as a concurrent hold succeeds. Takes no locks."""

    return eligible_vehicles(model_id, start, end, now=now).count()


def has_blocking_overlap(vehicle_id, start: datetime, end: datetime, *, now: datetime) -> bool:
    return (
        BookingRecord.objects.filter(vehicle_id=vehicle_id)
        .blocking(now)
        .overlapping(start, end)
        .exists()
    )


def claim_vehicle(model_id, start: datetime, end: datetime, *, now: datetime) -> Optional[UUID]:
    """Claim the first eligible vehicle for [start, end), or return None.

    Must run inside ``transaction.atomic()``; the PENDING record has to be
    inserted in the same transaction. Candidates locked by a concurrent
    allocation are skipped. Every claimed candidate is re-checked against the
    ledger because the candidate list may predate a concurrent commit.
    """

    candidates = list(eligible_vehicles(model_id, start, end, now=now).values_list("pk", flat=True))
    for vehicle_id in candidates:
        if not Vehicle.objects.claim(vehicle_id):
            logger.debug(f"Vehicle {vehicle_id} is claimed by another allocation, skipping")
            continue
        if has_blocking_overlap(vehicle_id, start, end, now=now):
            logger.debug(f"Vehicle {vehicle_id} was booked concurrently, skipping")
            continue
        return vehicle_id
    return None


@transaction.atomic
def expire_stale_holds(now: datetime) -> List[UUID]:
    """Flip every PENDING record with ``expires_at`` before ``now`` to EXPIRED.

    Rows currently locked by a confirm or cancel are left for the next sweep.
    Returns the ids of the records that were expired.
    """

    stale = _lock_queryset_if_possible(BookingRecord.objects.stale(now), skip_locked=True)
    reservation_ids = list(stale.values_list("pk", flat=True))
    if not reservation_ids:
        return []

    updated = BookingRecord.objects.stale(now).filter(pk__in=reservation_ids).update(
        status=BookingRecord.Status.EXPIRED,
        expires_at=None,
        last_updated_at=now,
    )
    if updated != len(reservation_ids):
        # A record left PENDING between the select and the update.
        reservation_ids = list(
            BookingRecord.objects.filter(
                pk__in=reservation_ids,
                status=BookingRecord.Status.EXPIRED,
                last_updated_at=now,
            ).values_list("pk", flat=True)
        )
    return reservation_ids
