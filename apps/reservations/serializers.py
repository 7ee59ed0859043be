"""Serializers for the reservation endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import BookingRecord


class CreateHoldSerializer(serializers.Serializer):
    """Input of a temporary hold request."""

    model_id = serializers.UUIDField()
    external_booking_id = serializers.CharField(max_length=64)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()


class ConfirmReservationSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)


class AvailabilityQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()


class HoldSerializer(serializers.ModelSerializer):
    """Response of a placed (or replayed) hold."""

    reservation_id = serializers.UUIDField(source="id", read_only=True)

    class Meta:
        model = BookingRecord
        fields = ["reservation_id", "vehicle_id", "model_id", "external_booking_id", "status", "expires_at"]
        read_only_fields = fields


class BookingRecordSerializer(serializers.ModelSerializer):
    """Detailed ledger record."""

    reservation_id = serializers.UUIDField(source="id", read_only=True)

    class Meta:
        model = BookingRecord
        fields = [
            "reservation_id",
            "vehicle_id",
            "model_id",
            "external_booking_id",
            "interval_start",
            "interval_end",
            "status",
            "expires_at",
            "payment_reference",
            "notes",
            "cancellation_reason",
            "created_at",
            "confirmed_at",
            "cancelled_at",
            "last_updated_at",
        ]
        read_only_fields = fields
