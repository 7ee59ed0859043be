"""Error taxonomy of the reservation core.

Every error names its kind (``code``) and carries the identifiers a caller
needs to retry or escalate without server-side log correlation.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError


class ReservationError(DomainError):
    code = "reservation_error"


class InvalidDateRange(ReservationError):
    """Malformed, past or too long interval. Rejected before any lock is taken."""

    code = "invalid_date_range"


class NoVehicleAvailable(ReservationError):
    """Every eligible vehicle is booked or claimed. A normal contention outcome."""

    code = "no_vehicle_available"

    def __init__(self, model_id, message: str = "No vehicles available for the requested dates", **details):
        super().__init__(message, model_id=model_id, **details)
        self.model_id = model_id


class ReservationNotFound(ReservationError):
    code = "reservation_not_found"

    def __init__(self, reservation_id):
        super().__init__(f"Reservation {reservation_id} not found", reservation_id=reservation_id)
        self.reservation_id = reservation_id


class NoActiveReservation(ReservationNotFound):
    """No PENDING or CONFIRMED record exists for an external booking id."""

    def __init__(self, external_booking_id):
        ReservationError.__init__(
            self,
            f"No active reservation for booking {external_booking_id}",
            external_booking_id=external_booking_id,
        )
        self.reservation_id = None
        self.external_booking_id = external_booking_id


class ReservationExpired(ReservationError):
    code = "reservation_expired"

    def __init__(self, reservation_id, expired_at=None):
        super().__init__(
            f"Reservation {reservation_id} has expired. Please create a new reservation.",
            reservation_id=reservation_id,
            expired_at=expired_at.isoformat() if expired_at else None,
        )
        self.reservation_id = reservation_id


class InvalidStateTransition(ReservationError):
    code = "invalid_state_transition"

    def __init__(self, reservation_id, current_status: str, expected_status: str):
        super().__init__(
            f"Reservation {reservation_id} is {current_status}, expected {expected_status}",
            reservation_id=reservation_id,
            current_status=current_status,
            expected_status=expected_status,
        )
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.expected_status = expected_status


class ReservationStorageError(ReservationError):
    """Transaction timed out, deadlocked or lost its connection. Safe to retry."""

    code = "storage_unavailable"
    retryable = True
