"""
Reservation URL routes.
"""

from django.urls import path

from . import views

app_name = "reservations"

urlpatterns = [
    path("reservations/create/", views.create, name="create"),
    path("reservations/slots/", views.slot_list, name="slots"),
    path("reservations/success/", views.success, name="success"),
    path("reservations/badge/", views.active_badge, name="badge"),
    path("profile/reservations/", views.my_reservations, name="my"),
    path("profile/reservations/<str:reservation_id>/confirm/", views.confirm, name="confirm"),
    path("profile/reservations/<str:reservation_id>/cancel/", views.cancel, name="cancel"),
]
