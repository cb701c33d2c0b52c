"""Django app configuration for reservations module."""

from django.apps import AppConfig


class ReservationsConfig(AppConfig):
    """Table bookings: slot picking, history and status actions."""

    name = "apps.web.reservations"
    verbose_name = "Reservations"
