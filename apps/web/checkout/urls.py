"""
Checkout URL routes.
"""

from django.urls import path

from . import views

app_name = "checkout"

urlpatterns = [
    path("checkout/", views.start, name="start"),
    path("checkout/details/", views.details, name="details"),
    path("checkout/confirm/", views.confirm, name="confirm"),
    path("checkout/success/<str:order_id>/", views.success, name="success"),
    path("profile/orders/", views.order_list, name="orders"),
]
