"""
Reservation Domain Events

Events that represent things that have happened to ledger records.
These are published after successful transaction commits.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class HoldPlaced(DomainEvent):
    """
    Event: A vehicle was claimed and a PENDING record inserted

    The booking orchestrator is expected to confirm or cancel
    before ``expires_at``.
    """
    reservation_id: UUID = None
    vehicle_id: UUID = None
    model_id: UUID = None
    external_booking_id: str = ''
    expires_at: datetime = None


@dataclass
class ReservationConfirmed(DomainEvent):
    """Event: Hold confirmed after payment (PENDING -> CONFIRMED)"""
    reservation_id: UUID = None
    vehicle_id: UUID = None
    external_booking_id: str = ''
    payment_reference: str = ''
    confirmed_at: datetime = None


@dataclass
class ReservationCancelled(DomainEvent):
    """Event: Hold cancelled by the caller (PENDING -> CANCELLED)"""
    reservation_id: UUID = None
    vehicle_id: UUID = None
    external_booking_id: str = ''
    reason: str = ''


@dataclass
class ReservationExpired(DomainEvent):
    """
    Event: A single hold was found past its deadline on read
    (PENDING -> EXPIRED)
    """
    reservation_id: UUID = None
    vehicle_id: UUID = None
    external_booking_id: str = ''


@dataclass
class StaleHoldsExpired(DomainEvent):
    """Event: A reaper sweep expired a batch of holds"""
    count: int = 0
    swept_at: datetime = None
    reservation_ids: List[UUID] = field(default_factory=list)
