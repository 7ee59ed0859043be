"""Admin registration for the booking ledger."""

from __future__ import annotations

from django.contrib import admin

from .models import BookingRecord


@admin.register(BookingRecord)
class BookingRecordAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "external_booking_id",
        "vehicle_id",
        "status",
        "interval_start",
        "interval_end",
        "expires_at",
        "created_at",
    )
    list_filter = ("status", "interval_start", "created_at")
    search_fields = ("external_booking_id", "payment_reference", "vehicle_id")
    date_hierarchy = "created_at"

    # The ledger is only written through the reservation commands.
    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
