"""Vehicle read model for the fleet reservation core."""

from __future__ import annotations

import uuid

from django.db import connections, models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class VehicleQuerySet(models.QuerySet):
    def available(self):
        return self.filter(status=Vehicle.OperationalStatus.AVAILABLE)

    def for_model(self, model_id):
        return self.filter(model_id=model_id)

    def allocation_order(self):
        """Least used first, id as the deterministic tie-break."""
        return self.order_by("mileage_km", "id")

    def claim(self, vehicle_id) -> bool:
        """Try to take an exclusive row claim on an AVAILABLE vehicle.

        Non-blocking: a row already locked by a concurrent transaction is
        skipped and ``False`` is returned instead of waiting. Must run
        inside ``transaction.atomic()``; the claim lasts until it ends.
        On backends without SKIP LOCKED (SQLite) the query degrades to a
        plain read and writers are serialized by the backend instead.
        """

        qs = self.available().filter(pk=vehicle_id)
        if connections[self.db].features.has_select_for_update_skip_locked:
            qs = qs.select_for_update(skip_locked=True)
        return bool(list(qs.values_list("pk", flat=True)))


class Vehicle(models.Model):
    """A physical vehicle that can be held for a booking period."""

    class OperationalStatus(models.TextChoices):
        AVAILABLE = "available", _("Available")
        UNDER_MAINTENANCE = "under_maintenance", _("Under maintenance")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    model_id = models.UUIDField(
        db_index=True,
        help_text=_("Car model the vehicle belongs to; allocation requests are made per model."),
    )
    license_plate = models.CharField(max_length=20, unique=True)
    status = models.CharField(
        max_length=32,
        choices=OperationalStatus.choices,
        default=OperationalStatus.AVAILABLE,
    )
    mileage_km = models.PositiveIntegerField(
        default=0,
        help_text=_("Accumulated usage, used to spread holds across the fleet."),
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VehicleQuerySet.as_manager()

    class Meta:
        verbose_name = _("Vehicle")
        verbose_name_plural = _("Vehicles")
        ordering = ["license_plate"]
        indexes = [
            models.Index(fields=["model_id", "status", "mileage_km"], name="fleet_vehicle_alloc_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.license_plate} ({self.get_status_display()})"

    @property
    def is_available(self) -> bool:
        return self.status == self.OperationalStatus.AVAILABLE
