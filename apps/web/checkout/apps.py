"""Django app configuration for checkout module."""

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    """Order wizard and order history."""

    name = "apps.web.checkout"
    verbose_name = "Checkout"
