"""Admin registration for the vehicle read model."""

from __future__ import annotations

from django.contrib import admin

from .models import Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("license_plate", "model_id", "status", "mileage_km", "updated_at")
    list_filter = ("status",)
    search_fields = ("license_plate", "model_id")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("model_id", "mileage_km")

    # Vehicles are owned by the fleet inventory service.
    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
