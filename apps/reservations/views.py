"""API views for the reservation core.

Thin callers: every view validates input, dispatches one command or query on
the message bus and renders the result.
"""

from __future__ import annotations

from rest_framework import generics, permissions, status  # type: ignore
from rest_framework.exceptions import ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.exceptions import DomainError

from .application.command_handlers import (
    CancelByBookingCommand,
    CancelReservationCommand,
    CheckAvailabilityQuery,
    ConfirmReservationCommand,
    CreateHoldCommand,
    GetReservationQuery,
)
from .filters import BookingRecordFilterSet
from .models import BookingRecord
from .serializers import (
    AvailabilityQuerySerializer,
    BookingRecordSerializer,
    ConfirmReservationSerializer,
    CreateHoldSerializer,
    HoldSerializer,
)

STATUS_BY_ERROR_CODE = {
    "invalid_date_range": status.HTTP_400_BAD_REQUEST,
    "invalid_state_transition": status.HTTP_400_BAD_REQUEST,
    "reservation_not_found": status.HTTP_404_NOT_FOUND,
    "no_vehicle_available": status.HTTP_409_CONFLICT,
    "reservation_expired": status.HTTP_410_GONE,
    "storage_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(exc: DomainError) -> Response:
    return Response(exc.to_dict(), status=STATUS_BY_ERROR_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST))


def reservation_exception_handler(exc, context):  # type: ignore
    """DRF exception handler rendering every failure as {"error", "message", "details"}."""

    if isinstance(exc, DomainError):
        return error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        message, details = "Invalid request data", response.data
    else:
        message, details = str(getattr(exc, "detail", exc)), {}
    response.data = {
        "error": getattr(exc, "default_code", "error"),
        "message": message,
        "details": details,
    }
    return response


class TemporaryReservationView(APIView):
    """POST: place a temporary hold on one vehicle of a model."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = CreateHoldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = message_bus.handle_command(CreateHoldCommand(
            model_id=data["model_id"],
            external_booking_id=data["external_booking_id"],
            interval_start=data["start_date"],
            interval_end=data["end_date"],
        ))
        if not result.ok:
            return error_response(result.error)

        return Response(
            HoldSerializer(result.reservation).data,
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class ReservationListView(generics.ListAPIView):
    """Read-only ledger listing for reporting, newest first."""

    permission_classes = [permissions.AllowAny]
    queryset = BookingRecord.objects.all().order_by("-created_at")
    serializer_class = BookingRecordSerializer
    filterset_class = BookingRecordFilterSet


class ReservationDetailView(APIView):
    """GET: one record (expired lazily when stale). DELETE: cancel a hold."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, reservation_id):  # type: ignore
        record = message_bus.handle_command(GetReservationQuery(reservation_id=reservation_id))
        return Response(BookingRecordSerializer(record).data)

    def delete(self, request, reservation_id):  # type: ignore
        message_bus.handle_command(CancelReservationCommand(
            reservation_id=reservation_id,
            reason=request.query_params.get("reason") or None,
        ))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReservationByBookingView(APIView):
    """DELETE: cancel the active hold of an external booking."""

    permission_classes = [permissions.AllowAny]

    def delete(self, request, external_booking_id):  # type: ignore
        message_bus.handle_command(CancelByBookingCommand(
            external_booking_id=external_booking_id,
            reason=request.query_params.get("reason") or None,
        ))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ConfirmReservationView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, reservation_id):  # type: ignore
        serializer = ConfirmReservationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = message_bus.handle_command(ConfirmReservationCommand(
            reservation_id=reservation_id,
            payment_reference=serializer.validated_data["payment_reference"],
            notes=serializer.validated_data.get("notes") or None,
        ))
        return Response(BookingRecordSerializer(record).data)


class ModelAvailabilityCountView(APIView):
    """GET: advisory number of free vehicles of a model for a period."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, model_id):  # type: ignore
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        start = serializer.validated_data["start_date"]
        end = serializer.validated_data["end_date"]

        count = message_bus.handle_command(CheckAvailabilityQuery(
            model_id=model_id,
            interval_start=start,
            interval_end=end,
        ))
        return Response({
            "model_id": str(model_id),
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "available_count": count,
        })
