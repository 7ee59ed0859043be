"""Concurrent hold requests against a shared database.

Each worker thread opens its own database connection, so these tests run in
real transactions instead of the per-test transaction of ``TestCase``.
"""

from __future__ import annotations

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor

from django.db import connection
from django.test import TransactionTestCase

from apps.reservations.application.command_handlers import CreateHoldCommand
from apps.reservations.exceptions import NoVehicleAvailable
from apps.reservations.models import BookingRecord
from shared.domain.value_objects import intervals_overlap

from .support import JAN1, JAN4, JAN5, JAN8, Handlers, make_vehicle, new_model_id


class ConcurrentAllocationTests(TransactionTestCase):
    def setUp(self) -> None:
        self.handlers = Handlers()
        self.model_id = new_model_id()

    def _run_concurrently(self, commands):
        barrier = threading.Barrier(len(commands))

        def worker(command):
            try:
                barrier.wait(timeout=10)
                return self.handlers.create_hold(command)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=len(commands)) as pool:
            return list(pool.map(worker, commands))

    def test_bounded_allocation_under_contention(self) -> None:
        vehicles = {make_vehicle(self.model_id, mileage_km=i).pk for i in range(3)}
        commands = [CreateHoldCommand(self.model_id, f"bk-{i}", JAN1, JAN5) for i in range(8)]

        results = self._run_concurrently(commands)

        successes = [result for result in results if result.ok]
        failures = [result for result in results if not result.ok]
        self.assertEqual(len(successes), 3)
        self.assertEqual({result.vehicle_id for result in successes}, vehicles)
        self.assertEqual(len(failures), 5)
        self.assertTrue(all(isinstance(result.error, NoVehicleAvailable) for result in failures))
        self.assertEqual(BookingRecord.objects.count(), 3)

    def test_no_double_booking_with_mixed_intervals(self) -> None:
        make_vehicle(self.model_id)
        make_vehicle(self.model_id)
        periods = [(JAN1, JAN5), (JAN4, JAN8), (JAN5, JAN8), (JAN1, JAN4)]
        commands = [
            CreateHoldCommand(self.model_id, f"bk-{i}", start, end)
            for i, (start, end) in enumerate(periods * 2)
        ]

        results = self._run_concurrently(commands)

        self.assertTrue(any(result.ok for result in results))
        now = self.handlers.clock.now()
        blocking = [record for record in BookingRecord.objects.all() if record.blocks_vehicle(now)]
        for first, second in itertools.combinations(blocking, 2):
            if first.vehicle_id != second.vehicle_id:
                continue
            self.assertFalse(
                intervals_overlap(first.interval_start, first.interval_end, second.interval_start, second.interval_end),
                f"{first.pk} and {second.pk} overlap on vehicle {first.vehicle_id}",
            )

    def test_concurrent_requests_for_same_booking_share_one_hold(self) -> None:
        for i in range(3):
            make_vehicle(self.model_id, mileage_km=i)
        commands = [CreateHoldCommand(self.model_id, "bk-shared", JAN1, JAN5) for _ in range(4)]

        results = self._run_concurrently(commands)

        self.assertTrue(all(result.ok for result in results))
        self.assertEqual(len({result.reservation_id for result in results}), 1)
        self.assertEqual(sum(result.created for result in results), 1)
        self.assertEqual(BookingRecord.objects.for_booking("bk-shared").count(), 1)
