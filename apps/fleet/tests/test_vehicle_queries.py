"""Tests for the vehicle read model used by the allocator."""

from __future__ import annotations

import uuid
from unittest import mock

from django.db import connection, transaction
from django.test import TestCase

from apps.fleet.models import Vehicle, VehicleQuerySet


class VehicleQuerySetTests(TestCase):
    def setUp(self) -> None:
        self.model_id = uuid.uuid4()
        self.busy = Vehicle.objects.create(model_id=self.model_id, license_plate="A001", mileage_km=900)
        self.fresh = Vehicle.objects.create(model_id=self.model_id, license_plate="A002", mileage_km=10)
        self.broken = Vehicle.objects.create(
            model_id=self.model_id,
            license_plate="A003",
            mileage_km=0,
            status=Vehicle.OperationalStatus.UNDER_MAINTENANCE,
        )
        Vehicle.objects.create(model_id=uuid.uuid4(), license_plate="B001")

    def test_available_for_model_in_allocation_order(self) -> None:
        vehicles = list(Vehicle.objects.for_model(self.model_id).available().allocation_order())

        self.assertEqual(vehicles, [self.fresh, self.busy])
        self.assertFalse(self.broken.is_available)

    def test_claim_succeeds_for_available_vehicle(self) -> None:
        with transaction.atomic():
            self.assertTrue(Vehicle.objects.claim(self.fresh.pk))

    def test_claim_fails_for_vehicle_under_maintenance(self) -> None:
        with transaction.atomic():
            self.assertFalse(Vehicle.objects.claim(self.broken.pk))
            self.assertFalse(Vehicle.objects.claim(uuid.uuid4()))

    def test_claim_skips_locked_rows_when_backend_supports_it(self) -> None:
        with mock.patch.object(connection.features, "has_select_for_update_skip_locked", True), \
                mock.patch.object(
                    VehicleQuerySet, "select_for_update", autospec=True, side_effect=lambda qs, **kwargs: qs
                ) as select_for_update:
            with transaction.atomic():
                self.assertTrue(Vehicle.objects.claim(self.fresh.pk))

        select_for_update.assert_called_once()
        self.assertEqual(select_for_update.call_args.kwargs, {"skip_locked": True})

    def test_claim_is_a_plain_read_without_skip_locked_support(self) -> None:
        with mock.patch.object(connection.features, "has_select_for_update_skip_locked", False), \
                mock.patch.object(VehicleQuerySet, "select_for_update", autospec=True) as select_for_update:
            with transaction.atomic():
                self.assertTrue(Vehicle.objects.claim(self.fresh.pk))

        select_for_update.assert_not_called()
