"""
Base Domain Classes

Foundational building blocks shared by the domain modules:
- ValueObject: Immutable objects compared by value
- EventRecorder: Mixin for objects that record domain events until commit
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class EventRecorder:
    """
    Mixin for consistency boundaries that emit domain events

    Events are kept on the instance until a unit of work collects them.
    Works for Django models as well as plain objects, so the buffer is
    created lazily instead of in ``__init__``.
    """

    def _event_buffer(self) -> List['DomainEvent']:
        buffer = self.__dict__.get('_recorded_events')
        if buffer is None:
            buffer = []
            self.__dict__['_recorded_events'] = buffer
        return buffer

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published"""
        self._event_buffer().append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self._event_buffer().clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return list(self._event_buffer())


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are published only after the surrounding transaction commits.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: UUID = None
