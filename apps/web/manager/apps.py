"""Django app configuration for manager module."""

from django.apps import AppConfig


class ManagerConfig(AppConfig):
    """Restaurant staff tools: menu, reservations and reports."""

    name = "apps.web.manager"
    verbose_name = "Manager"
