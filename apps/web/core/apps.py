"""Django app configuration for core module."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Session auth, roles and shared middleware."""

    name = "apps.web.core"
    verbose_name = "Core"
