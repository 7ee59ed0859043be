"""Booking ledger: the single source of truth for vehicle occupancy."""

from __future__ import annotations

import uuid
from datetime import datetime

from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorder

from .domain import events as domain_events
from .exceptions import InvalidStateTransition, ReservationExpired


class BookingRecordQuerySet(models.QuerySet):
    def overlapping(self, start: datetime, end: datetime):
        """Records whose [interval_start, interval_end) intersects [start, end)."""
        return self.filter(interval_start__lt=end, interval_end__gt=start)

    def blocking(self, now: datetime):
        """CONFIRMED records and PENDING holds that have not reached their deadline."""
        return self.filter(
            Q(status=BookingRecord.Status.CONFIRMED)
            | Q(status=BookingRecord.Status.PENDING, expires_at__gt=now)
        )

    def active(self):
        return self.filter(status__in=BookingRecord.ACTIVE_STATUSES)

    def stale(self, now: datetime):
        """PENDING holds whose deadline is strictly before ``now``."""
        return self.filter(status=BookingRecord.Status.PENDING, expires_at__lt=now)

    def for_booking(self, external_booking_id: str):
        return self.filter(external_booking_id=external_booking_id)


class BookingRecord(EventRecorder, models.Model):
    """One hold/confirmation attempt on one vehicle.

    Lifecycle: PENDING -> CONFIRMED | CANCELLED | EXPIRED. All three targets
    are terminal and no transition ever re-enters PENDING. ``expires_at`` is
    set only while PENDING. Rows are never deleted.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        EXPIRED = "expired", _("Expired")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Plain id values, not foreign keys: lookups only, nothing cascades.
    vehicle_id = models.UUIDField(db_index=True)
    model_id = models.UUIDField(db_index=True)
    external_booking_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text=_("Opaque key supplied by the booking orchestrator; idempotency key for holds."),
    )
    interval_start = models.DateTimeField()
    interval_end = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    expires_at = models.DateTimeField(null=True, blank=True)
    payment_reference = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    last_updated_at = models.DateTimeField(default=timezone.now)

    objects = BookingRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking record")
        verbose_name_plural = _("Booking records")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(interval_end__gt=models.F("interval_start")),
                name="booking_record_valid_interval",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status="pending", expires_at__isnull=False)
                    | (~Q(status="pending") & Q(expires_at__isnull=True))
                ),
                name="booking_record_expiry_iff_pending",
            ),
            models.UniqueConstraint(
                fields=["external_booking_id"],
                condition=Q(status__in=["pending", "confirmed"]),
                name="booking_record_one_active_per_booking",
            ),
        ]
        indexes = [
            models.Index(fields=["vehicle_id", "interval_start", "interval_end"], name="booking_record_vehicle_idx"),
            models.Index(fields=["status", "expires_at"], name="booking_record_expiry_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation {self.pk} on {self.vehicle_id} ({self.status})"

    def is_expired(self, now: datetime) -> bool:
        """PENDING hold whose deadline has been reached."""
        return (
            self.status == self.Status.PENDING
            and self.expires_at is not None
            and now >= self.expires_at
        )

    def is_live(self, now: datetime) -> bool:
        return self.status == self.Status.PENDING and not self.is_expired(now)

    def blocks_vehicle(self, now: datetime) -> bool:
        return self.status == self.Status.CONFIRMED or self.is_live(now)

    # ---- transitions -----------------------------------------------------

    def _require_pending(self) -> None:
        if self.status != self.Status.PENDING:
            raise InvalidStateTransition(self.pk, self.status.upper(), self.Status.PENDING.upper())

    def confirm(self, payment_reference: str, *, now: datetime, notes: str | None = None) -> None:
        # Swept or not, a hold past its deadline fails as expired.
        if self.status == self.Status.EXPIRED or self.is_expired(now):
            raise ReservationExpired(self.pk, self.expires_at)
        self._require_pending()

        self.status = self.Status.CONFIRMED
        self.payment_reference = payment_reference
        self.confirmed_at = now
        self.expires_at = None
        self.last_updated_at = now
        if notes:
            self.notes = notes

        self.add_event(domain_events.ReservationConfirmed(
            aggregate_id=self.pk,
            reservation_id=self.pk,
            vehicle_id=self.vehicle_id,
            external_booking_id=self.external_booking_id,
            payment_reference=payment_reference,
            confirmed_at=now,
        ))

    def cancel(self, reason: str | None, *, now: datetime) -> None:
        self._require_pending()

        self.status = self.Status.CANCELLED
        self.cancelled_at = now
        self.cancellation_reason = (reason or "")[:255]
        self.expires_at = None
        self.last_updated_at = now

        self.add_event(domain_events.ReservationCancelled(
            aggregate_id=self.pk,
            reservation_id=self.pk,
            vehicle_id=self.vehicle_id,
            external_booking_id=self.external_booking_id,
            reason=self.cancellation_reason,
        ))

    def expire(self, *, now: datetime) -> None:
        self._require_pending()

        self.status = self.Status.EXPIRED
        self.expires_at = None
        self.last_updated_at = now

        self.add_event(domain_events.ReservationExpired(
            aggregate_id=self.pk,
            reservation_id=self.pk,
            vehicle_id=self.vehicle_id,
            external_booking_id=self.external_booking_id,
        ))

    TRANSITION_FIELDS = [
        "status",
        "expires_at",
        "payment_reference",
        "notes",
        "confirmed_at",
        "cancelled_at",
        "cancellation_reason",
        "last_updated_at",
    ]

    def save_transition(self) -> None:
        self.save(update_fields=self.TRANSITION_FIELDS)
