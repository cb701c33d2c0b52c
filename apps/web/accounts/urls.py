"""
Accounts URL routes.
"""

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("auth/login/", views.login_view, name="login"),
    path("auth/register/", views.register_view, name="register"),
    path("auth/logout/", views.logout_view, name="logout"),
    path("profile/", views.profile, name="profile"),
    path("profile/password/", views.change_password, name="change_password"),
    path("profile/cities/", views.city_options, name="city_options"),
]
