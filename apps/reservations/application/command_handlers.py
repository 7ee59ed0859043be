"""
Reservation Command Handlers

These are the use cases of the reservation core.
They orchestrate ledger operations within transactions.

Commands:
- CreateHoldCommand: Claim a vehicle and place a PENDING hold
- ConfirmReservationCommand: Confirm a hold after payment
- CancelReservationCommand: Cancel a hold
- CancelByBookingCommand: Cancel the hold of an external booking
- ExpireStaleHoldsCommand: Bulk-expire holds past their deadline

Queries:
- CheckAvailabilityQuery: Advisory count of free vehicles
- GetReservationQuery: Load one record, expiring it lazily when stale
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from shared.application.uow import DjangoUnitOfWork
from shared.infrastructure.clock import Clock, system_clock
from apps.reservations import services
from apps.reservations.conf import ReservationSettings
from apps.reservations.domain.events import HoldPlaced, StaleHoldsExpired
from apps.reservations.exceptions import (
    InvalidStateTransition,
    NoActiveReservation,
    NoVehicleAvailable,
    ReservationExpired,
    ReservationNotFound,
    ReservationStorageError,
)
from apps.reservations.models import BookingRecord

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateHoldCommand:
    """
    Command to place a temporary hold on one vehicle of a model

    ``external_booking_id`` is the idempotency key: repeating the command
    while the hold is active returns the same record.
    """
    model_id: UUID
    external_booking_id: str
    interval_start: datetime
    interval_end: datetime


@dataclass
class ConfirmReservationCommand:
    """Command to confirm a hold after successful payment"""
    reservation_id: UUID
    payment_reference: str
    notes: Optional[str] = None


@dataclass
class CancelReservationCommand:
    """Command to cancel a hold"""
    reservation_id: UUID
    reason: Optional[str] = None


@dataclass
class CancelByBookingCommand:
    """Command to cancel the active hold of an external booking"""
    external_booking_id: str
    reason: Optional[str] = None


@dataclass
class ExpireStaleHoldsCommand:
    """Command for one reaper sweep; ``now`` defaults to the handler's clock"""
    now: Optional[datetime] = None


@dataclass
class CheckAvailabilityQuery:
    model_id: UUID
    interval_start: datetime
    interval_end: datetime


@dataclass
class GetReservationQuery:
    reservation_id: UUID


# ===== Results =====

@dataclass
class HoldResult:
    """
    Outcome of CreateHold

    Running out of vehicles is an expected outcome of contention, so it is
    returned in ``error`` instead of being raised.
    """
    reservation: Optional[BookingRecord] = None
    created: bool = False
    error: Optional[NoVehicleAvailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reservation_id(self) -> Optional[UUID]:
        return self.reservation.pk if self.reservation else None

    @property
    def vehicle_id(self) -> Optional[UUID]:
        return self.reservation.vehicle_id if self.reservation else None

    @property
    def expires_at(self) -> Optional[datetime]:
        return self.reservation.expires_at if self.reservation else None


@contextmanager
def storage_errors(operation: str, **details):
    """Translate timeouts, deadlocks and lost connections into a retryable error."""
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as e:
        logger.error(f"{operation} failed on storage: {e}", exc_info=True)
        raise ReservationStorageError(
            f"{operation} could not be completed, please retry",
            operation=operation,
            **details
        ) from e


class _Handler:
    def __init__(self, clock: Clock = system_clock, settings: Optional[ReservationSettings] = None):
        self.clock = clock
        self.settings = settings or ReservationSettings.from_django()

    def _unit_of_work(self) -> DjangoUnitOfWork:
        return DjangoUnitOfWork(timeout=self.settings.transaction_timeout.total_seconds())

    @staticmethod
    def _get_for_update(reservation_id) -> BookingRecord:
        try:
            return BookingRecord.objects.select_for_update().get(pk=reservation_id)
        except (BookingRecord.DoesNotExist, ValidationError):
            raise ReservationNotFound(reservation_id)


# ===== Command Handlers =====

class CreateHoldHandler(_Handler):
    """
    Handler for CreateHold command

    Strategy:
    1. Validate the interval (no lock taken on failure)
    2. Return the active record for the external booking id, if any,
       expiring it first when its deadline has passed
    3. Claim the least used eligible vehicle with a skip-locked row claim
    4. Insert the PENDING record in the same transaction
    5. The conditional unique constraint resolves two holds racing on
       the same external booking id: the loser returns the winner's record
    """

    def handle(self, command: CreateHoldCommand) -> HoldResult:
        now = self.clock.now()
        start, end = services.validate_interval(
            command.interval_start,
            command.interval_end,
            now=now,
            max_span=self.settings.max_span,
        )

        logger.info(
            f"Placing hold for model {command.model_id}, booking {command.external_booking_id}, "
            f"period {start.isoformat()} - {end.isoformat()}"
        )

        with storage_errors("create_hold", model_id=command.model_id,
                            external_booking_id=command.external_booking_id):
            result = self._allocate(command, start, end, now)

        if result.error is not None:
            logger.info(f"No vehicle available for model {command.model_id} ({command.external_booking_id})")
        elif result.created:
            logger.info(
                f"Hold {result.reservation_id} placed on vehicle {result.vehicle_id} "
                f"until {result.expires_at.isoformat()}"
            )
        else:
            logger.info(
                f"Booking {command.external_booking_id} already holds reservation {result.reservation_id}"
            )
        return result

    def _allocate(self, command: CreateHoldCommand, start, end, now) -> HoldResult:
        with self._unit_of_work() as uow:
            existing = (
                BookingRecord.objects.active()
                .for_booking(command.external_booking_id)
                .select_for_update()
                .first()
            )
            if existing is not None:
                if not existing.is_expired(now):
                    return HoldResult(reservation=existing)
                existing.expire(now=now)
                existing.save_transition()
                uow.collect_events(existing)
                logger.info(f"Expired stale hold {existing.pk} before reallocating")

            vehicle_id = services.claim_vehicle(command.model_id, start, end, now=now)
            if vehicle_id is None:
                return HoldResult(error=NoVehicleAvailable(
                    command.model_id,
                    external_booking_id=command.external_booking_id,
                    interval_start=start.isoformat(),
                    interval_end=end.isoformat(),
                ))

            record = BookingRecord(
                vehicle_id=vehicle_id,
                model_id=command.model_id,
                external_booking_id=command.external_booking_id,
                interval_start=start,
                interval_end=end,
                status=BookingRecord.Status.PENDING,
                expires_at=now + self.settings.hold_duration,
                created_at=now,
                last_updated_at=now,
            )
            try:
                with transaction.atomic():
                    record.save(force_insert=True)
            except IntegrityError:
                winner = BookingRecord.objects.active().for_booking(command.external_booking_id).first()
                if winner is None:
                    raise
                logger.info(f"Concurrent hold for booking {command.external_booking_id} won the race")
                return HoldResult(reservation=winner)

            record.add_event(HoldPlaced(
                aggregate_id=record.pk,
                reservation_id=record.pk,
                vehicle_id=record.vehicle_id,
                model_id=record.model_id,
                external_booking_id=record.external_booking_id,
                expires_at=record.expires_at,
            ))
            uow.collect_events(record)

        return HoldResult(reservation=record, created=True)


class ConfirmReservationHandler(_Handler):
    """
    Handler for confirming a hold after payment

    A hold past its deadline is committed as EXPIRED before
    ReservationExpired is raised, so concurrent readers and the reaper
    see consistent state.
    """

    def handle(self, command: ConfirmReservationCommand) -> BookingRecord:
        logger.info(f"Confirming reservation {command.reservation_id} with payment {command.payment_reference}")
        now = self.clock.now()
        expired = None

        with storage_errors("confirm", reservation_id=command.reservation_id):
            with self._unit_of_work() as uow:
                record = self._get_for_update(command.reservation_id)

                if record.is_expired(now):
                    expired = ReservationExpired(record.pk, record.expires_at)
                    record.expire(now=now)
                else:
                    record.confirm(command.payment_reference, now=now, notes=command.notes)

                record.save_transition()
                uow.collect_events(record)

        if expired is not None:
            logger.warning(f"Reservation {record.pk} expired before confirmation")
            raise expired

        logger.info(f"Reservation {record.pk} confirmed on vehicle {record.vehicle_id}")
        return record


class CancelReservationHandler(_Handler):
    """Handler for cancelling a hold"""

    def handle(self, command: CancelReservationCommand) -> BookingRecord:
        logger.info(f"Cancelling reservation {command.reservation_id}: {command.reason or 'no reason given'}")
        with storage_errors("cancel", reservation_id=command.reservation_id):
            return self._cancel(lambda: self._get_for_update(command.reservation_id), command.reason)

    def _cancel(self, load: Callable[[], BookingRecord], reason: Optional[str]) -> BookingRecord:
        now = self.clock.now()
        expired = False

        with self._unit_of_work() as uow:
            record = load()

            if record.is_expired(now):
                expired = True
                record.expire(now=now)
            else:
                record.cancel(reason, now=now)

            record.save_transition()
            uow.collect_events(record)

        if expired:
            raise InvalidStateTransition(
                record.pk,
                BookingRecord.Status.EXPIRED.upper(),
                BookingRecord.Status.PENDING.upper(),
            )

        logger.info(f"Reservation {record.pk} cancelled, vehicle {record.vehicle_id} released")
        return record


class CancelByBookingHandler(CancelReservationHandler):
    """
    Handler for cancelling by the orchestrator's booking id

    Cancels the active record of the booking. A confirmed booking is not
    cancellable and a swept hold is no longer active.
    """

    def handle(self, command: CancelByBookingCommand) -> BookingRecord:
        logger.info(
            f"Cancelling hold of booking {command.external_booking_id}: {command.reason or 'no reason given'}"
        )
        with storage_errors("cancel_by_booking", external_booking_id=command.external_booking_id):
            return self._cancel(lambda: self._get_active_for_booking(command.external_booking_id), command.reason)

    @staticmethod
    def _get_active_for_booking(external_booking_id: str) -> BookingRecord:
        record = (
            BookingRecord.objects.active()
            .for_booking(external_booking_id)
            .select_for_update()
            .first()
        )
        if record is None:
            raise NoActiveReservation(external_booking_id)
        return record


class ExpireStaleHoldsHandler(_Handler):
    """Handler for one reaper sweep. Returns the number of expired holds."""

    def handle(self, command: ExpireStaleHoldsCommand) -> int:
        now = command.now or self.clock.now()

        with storage_errors("expire_stale_holds"):
            with self._unit_of_work() as uow:
                reservation_ids = services.expire_stale_holds(now)
                if reservation_ids:
                    uow.add_event(StaleHoldsExpired(
                        count=len(reservation_ids),
                        swept_at=now,
                        reservation_ids=reservation_ids,
                    ))

        if reservation_ids:
            logger.info(f"Expired {len(reservation_ids)} stale holds")
        return len(reservation_ids)


# ===== Query Handlers =====

class CheckAvailabilityHandler(_Handler):
    """Advisory count of free vehicles. Takes no locks."""

    def handle(self, query: CheckAvailabilityQuery) -> int:
        now = self.clock.now()
        start, end = services.validate_interval(
            query.interval_start,
            query.interval_end,
            now=now,
            max_span=self.settings.max_span,
        )
        with storage_errors("check_availability", model_id=query.model_id):
            return services.count_available(query.model_id, start, end, now=now)


class GetReservationHandler(_Handler):
    """Load one record; a hold found past its deadline is expired on read"""

    def handle(self, query: GetReservationQuery) -> BookingRecord:
        now = self.clock.now()
        with storage_errors("get_reservation", reservation_id=query.reservation_id):
            try:
                record = BookingRecord.objects.get(pk=query.reservation_id)
            except (BookingRecord.DoesNotExist, ValidationError):
                raise ReservationNotFound(query.reservation_id)

            if not record.is_expired(now):
                return record

            with self._unit_of_work() as uow:
                record = self._get_for_update(query.reservation_id)
                if record.is_expired(now):
                    record.expire(now=now)
                    record.save_transition()
                    uow.collect_events(record)
                    logger.info(f"Reservation {record.pk} expired on read")

        return record
