"""Django app configuration for cart module."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """Customer cart backed by the backend's /cart endpoints."""

    name = "apps.web.cart"
    verbose_name = "Cart"
