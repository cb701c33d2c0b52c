"""
Manager URL routes (mounted under /manager/).
"""

from django.urls import path

from . import views

app_name = "manager"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    # Menu
    path("menu/", views.menu_list, name="menu"),
    path("menu/new/", views.menu_create, name="menu_create"),
    path("menu/<int:item_id>/edit/", views.menu_edit, name="menu_edit"),
    path("menu/<int:item_id>/delete/", views.menu_delete, name="menu_delete"),
    path("menu/<int:item_id>/restore/", views.menu_restore, name="menu_restore"),
    # Reservations
    path("reservations/", views.reservation_list, name="reservations"),
    path(
        "reservations/<str:reservation_id>/confirm/",
        views.reservation_confirm,
        name="reservation_confirm",
    ),
    path(
        "reservations/<str:reservation_id>/cancel/",
        views.reservation_cancel,
        name="reservation_cancel",
    ),
    path("reservations/create/", views.reservation_pick_restaurant, name="reservation_pick"),
    path(
        "reservations/create/<int:restaurant_id>/",
        views.reservation_create,
        name="reservation_create",
    ),
    # Reports
    path("reports/", views.reports, name="reports"),
    path("reports/export/<str:kind>/", views.report_export, name="report_export"),
]
