"""
Catalog URL routes.
"""

from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    path("", views.home, name="home"),
    path("restaurants/", views.restaurant_list, name="restaurant_list"),
    path("restaurants/<int:restaurant_id>/", views.restaurant_detail, name="restaurant_detail"),
    path("menu/", views.menu, name="menu"),
    path("menu/<int:item_id>/", views.menu_item_detail, name="menu_item"),
]
