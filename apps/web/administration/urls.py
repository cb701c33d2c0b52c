"""
Administration URL routes (mounted under /admin-panel/).
"""

from django.urls import path

from . import views

app_name = "administration"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("database/dump/", views.database_dump, name="database_dump"),
    path("users/", views.user_list, name="users"),
    path("users/new/", views.user_create, name="user_create"),
    path("users/<str:user_id>/edit/", views.user_edit, name="user_edit"),
    path("users/<str:user_id>/delete/", views.user_delete, name="user_delete"),
    path("audit/", views.audit, name="audit"),
]
