"""Django app configuration for catalog module."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Restaurants, menu and the home page."""

    name = "apps.web.catalog"
    verbose_name = "Catalog"
