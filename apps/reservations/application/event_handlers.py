"""
Reservation Event Handlers

Run after the transaction that produced the event has committed.
Failures are logged by the message bus and never reach the caller.
"""

import logging

from apps.reservations.domain.events import (
    HoldPlaced,
    ReservationCancelled,
    ReservationConfirmed,
    ReservationExpired,
    StaleHoldsExpired,
)

logger = logging.getLogger('apps.reservations.audit')


def log_hold_placed(event: HoldPlaced):
    logger.info(
        f"[AUDIT] Hold {event.reservation_id} placed on vehicle {event.vehicle_id} "
        f"(model {event.model_id}, booking {event.external_booking_id}), "
        f"expires at {event.expires_at.isoformat() if event.expires_at else None}"
    )


def log_reservation_confirmed(event: ReservationConfirmed):
    logger.info(
        f"[AUDIT] Reservation {event.reservation_id} confirmed on vehicle {event.vehicle_id} "
        f"with payment {event.payment_reference}"
    )


def log_reservation_cancelled(event: ReservationCancelled):
    logger.info(
        f"[AUDIT] Reservation {event.reservation_id} cancelled, vehicle {event.vehicle_id} released"
        + (f": {event.reason}" if event.reason else "")
    )


def log_reservation_expired(event: ReservationExpired):
    logger.info(f"[AUDIT] Reservation {event.reservation_id} expired, vehicle {event.vehicle_id} released")


def log_stale_holds_expired(event: StaleHoldsExpired):
    logger.info(f"[AUDIT] Reaper expired {event.count} holds at {event.swept_at.isoformat()}")


EVENT_HANDLERS = {
    HoldPlaced: [log_hold_placed],
    ReservationConfirmed: [log_reservation_confirmed],
    ReservationCancelled: [log_reservation_cancelled],
    ReservationExpired: [log_reservation_expired],
    StaleHoldsExpired: [log_stale_holds_expired],
}
