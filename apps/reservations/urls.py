"""URL routing for the reservation core."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    ConfirmReservationView,
    ModelAvailabilityCountView,
    ReservationByBookingView,
    ReservationDetailView,
    ReservationListView,
    TemporaryReservationView,
)

urlpatterns = [
    path("reservations/", ReservationListView.as_view(), name="reservation-list"),
    path("reservations/temporary/", TemporaryReservationView.as_view(), name="reservation-temporary"),
    path(
        "reservations/by-booking/<str:external_booking_id>/",
        ReservationByBookingView.as_view(),
        name="reservation-by-booking",
    ),
    path("reservations/<uuid:reservation_id>/", ReservationDetailView.as_view(), name="reservation-detail"),
    path(
        "reservations/<uuid:reservation_id>/confirm/",
        ConfirmReservationView.as_view(),
        name="reservation-confirm",
    ),
    path(
        "models/<uuid:model_id>/availability-count/",
        ModelAvailabilityCountView.as_view(),
        name="model-availability-count",
    ),
]
