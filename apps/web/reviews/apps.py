"""Django app configuration for reviews module."""

from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    """Restaurant reviews and ratings."""

    name = "apps.web.reviews"
    verbose_name = "Reviews"
