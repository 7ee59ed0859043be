"""URL configuration for the fleet reservation service.

The `urlpatterns` list routes URLs to views. It includes the Django admin
and the application-level routes of the reservation core.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/fleet/', include('apps.reservations.urls')),
]
