"""
URL configuration for Supra.
"""

from django.urls import include, path

urlpatterns = [
    path("", include("apps.web.catalog.urls")),
    path("", include("apps.web.accounts.urls")),
    path("", include("apps.web.reservations.urls")),
    path("", include("apps.web.reviews.urls")),
    path("", include("apps.web.checkout.urls")),
    path("cart/", include("apps.web.cart.urls")),
    # Staff
    path("manager/", include("apps.web.manager.urls")),
    path("admin-panel/", include("apps.web.administration.urls")),
]
