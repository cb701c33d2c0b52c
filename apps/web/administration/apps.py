"""Django app configuration for administration module."""

from django.apps import AppConfig


class AdministrationConfig(AppConfig):
    """Admin panel: health, users and audit log."""

    name = "apps.web.administration"
    verbose_name = "Administration"
