"""
Common Value Objects

- TimeRange: half-open interval [start, end) used for booking periods
- intervals_overlap: the overlap predicate every availability check relies on
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from shared.domain.base import ValueObject


def intervals_overlap(start_a, end_a, start_b, end_b) -> bool:
    """
    Half-open interval intersection test

    [start_a, end_a) and [start_b, end_b) overlap iff
    start_a < end_b AND end_a > start_b.
    Touching boundaries (end_a == start_b) do not overlap.
    """
    return start_a < end_b and end_a > start_b


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for vehicle booking periods and availability checks.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Examples:
            - [Jan 1, Jan 5) overlaps with [Jan 4, Jan 8) -> True
            - [Jan 1, Jan 5) overlaps with [Jan 5, Jan 8) -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return intervals_overlap(self.start, self.end, other.start, other.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

