"""Unit tests for the half-open interval overlap predicate."""

from __future__ import annotations

from datetime import timedelta

from django.test import SimpleTestCase

from shared.domain.value_objects import TimeRange, intervals_overlap

from .support import JAN1, JAN4, JAN5, JAN8


class IntervalOverlapTests(SimpleTestCase):
    def test_partially_overlapping_intervals_conflict(self) -> None:
        self.assertTrue(intervals_overlap(JAN1, JAN5, JAN4, JAN8))
        self.assertTrue(intervals_overlap(JAN4, JAN8, JAN1, JAN5))

    def test_touching_boundaries_do_not_conflict(self) -> None:
        self.assertFalse(intervals_overlap(JAN1, JAN5, JAN5, JAN8))
        self.assertFalse(intervals_overlap(JAN5, JAN8, JAN1, JAN5))

    def test_containment_conflicts(self) -> None:
        self.assertTrue(intervals_overlap(JAN1, JAN8, JAN4, JAN5))

    def test_disjoint_intervals_do_not_conflict(self) -> None:
        self.assertFalse(intervals_overlap(JAN1, JAN4, JAN5, JAN8))


class TimeRangeTests(SimpleTestCase):
    def test_overlaps_with_uses_half_open_semantics(self) -> None:
        period = TimeRange(JAN1, JAN5)

        self.assertTrue(period.overlaps_with(TimeRange(JAN4, JAN8)))
        self.assertFalse(period.overlaps_with(TimeRange(JAN5, JAN8)))

    def test_duration(self) -> None:
        period = TimeRange(JAN1, JAN5)

        self.assertEqual(period.duration, timedelta(days=4))

    def test_empty_range_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TimeRange(JAN5, JAN5)

    def test_overlap_with_other_type_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            TimeRange(JAN1, JAN5).overlaps_with((JAN4, JAN8))
