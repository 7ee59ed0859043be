"""Tests for the reservation tunables and the database settings they drive."""

from __future__ import annotations

import importlib
import os
from datetime import timedelta
from unittest import mock

from django.conf import settings
from django.test import SimpleTestCase, override_settings

from apps.reservations.conf import ReservationSettings
from config.settings import base


class TransactionTimeoutSettingsTests(SimpleTestCase):
    def tearDown(self) -> None:
        importlib.reload(base)

    def test_sqlite_busy_timeout_follows_transaction_timeout(self) -> None:
        env = {"DB_ENGINE": "django.db.backends.sqlite3", "RESERVATION_TRANSACTION_TIMEOUT_SECONDS": "3"}

        with mock.patch.dict(os.environ, env):
            reloaded = importlib.reload(base)

        self.assertEqual(reloaded.RESERVATION_TRANSACTION_TIMEOUT_SECONDS, 3.0)
        self.assertEqual(reloaded.DATABASES["default"]["OPTIONS"]["timeout"], 3.0)

    def test_active_database_uses_the_transaction_timeout(self) -> None:
        self.assertEqual(
            settings.DATABASES["default"]["OPTIONS"]["timeout"],
            settings.RESERVATION_TRANSACTION_TIMEOUT_SECONDS,
        )

    @override_settings(RESERVATION_TRANSACTION_TIMEOUT_SECONDS=2.5, RESERVATION_HOLD_SECONDS=45)
    def test_reservation_settings_read_from_django(self) -> None:
        tunables = ReservationSettings.from_django()

        self.assertEqual(tunables.transaction_timeout, timedelta(seconds=2.5))
        self.assertEqual(tunables.hold_duration, timedelta(seconds=45))
