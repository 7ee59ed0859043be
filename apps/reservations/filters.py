"""FilterSet for the read-only ledger listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import BookingRecord


class BookingRecordFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=BookingRecord.Status.choices)
    vehicle_id = django_filters.UUIDFilter(field_name="vehicle_id")
    model_id = django_filters.UUIDFilter(field_name="model_id")
    external_booking_id = django_filters.CharFilter(field_name="external_booking_id", lookup_expr="exact")

    # Records whose period overlaps [start_date, end_date)
    start_date = django_filters.IsoDateTimeFilter(field_name="interval_end", lookup_expr="gt")
    end_date = django_filters.IsoDateTimeFilter(field_name="interval_start", lookup_expr="lt")

    class Meta:
        model = BookingRecord
        fields = ["status", "vehicle_id", "model_id", "external_booking_id"]
