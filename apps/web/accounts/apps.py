"""Django app configuration for accounts module."""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Login, registration and profile pages."""

    name = "apps.web.accounts"
    verbose_name = "Accounts"
